import logging
from dataclasses import dataclass
from typing import Any

from ..config import Policy
from ..exceptions import RecordStructureError
from .decoder import RecordDecoder
from .line_protocol import encode_record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranslationResult:
    payload: str
    translated: int
    skipped: int

    @property
    def is_empty(self) -> bool:
        return not self.payload


class BatchTranslator:
    """
    Translates a batch of raw records into one line protocol payload.

    Strict: the first undecodable record raises RecordStructureError and
    nothing of the batch is returned. Lenient: undecodable records are
    logged and skipped.
    """

    def __init__(self, policy: Policy = Policy.STRICT):
        self.policy = policy
        self.decoder = RecordDecoder(policy)

    def translate(self, records: list[Any], host: str) -> TranslationResult:
        lines: list[str] = []
        translated = 0
        skipped = 0

        for index, value in enumerate(records):
            try:
                record = self.decoder.decode(value, index)
            except RecordStructureError as e:
                if self.policy is Policy.STRICT:
                    raise
                logger.warning(f"[TRANSLATE] host={host} skipping {e}")
                skipped += 1
                continue

            lines.extend(encode_record(record, host))
            translated += 1

        return TranslationResult(payload="".join(lines), translated=translated, skipped=skipped)
