import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, status

from ..config import Policy, Settings
from ..deps import get_settings, get_writer
from ..exceptions import ParseError, RecordStructureError
from ..services import BatchTranslator, LineProtocolWriter, TranslationResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ingest"])

# RFC 6455 allows 123 bytes of reason in a close frame
CLOSE_REASON_LIMIT = 123


def parse_message(text: str) -> list[Any]:
    """
    Parse one inbound message into a list of raw records.

    A message is a batch when it is empty or its first element is an array;
    anything else is a single flat record.
    """
    try:
        doc = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise ParseError(f"could not parse json: {e}") from e

    if not isinstance(doc, list):
        raise ParseError("json is not an array")

    if not doc or isinstance(doc[0], list):
        return doc
    return [doc]


def close_reason(error: Exception) -> str:
    return str(error).encode("utf-8")[:CLOSE_REASON_LIMIT].decode("utf-8", "ignore")


class IngestSession:
    """
    One car connection: Connected -> Receiving -> Closed.

    Messages are handled one after another; the write of a finished batch is
    handed to the writer and not awaited.
    """

    def __init__(self, websocket: WebSocket, host: str, settings: Settings, writer: LineProtocolWriter):
        self.websocket = websocket
        self.host = host
        self.policy = settings.policy
        self.writer = writer
        self.translator = BatchTranslator(settings.policy)
        client = websocket.client
        self.peer = f"{client.host}:{client.port}" if client else "unknown"

    def handle_message(self, text: str) -> TranslationResult:
        records = parse_message(text)
        result = self.translator.translate(records, self.host)

        if result.is_empty:
            logger.warning(
                f"[INGEST] {self.peer} {self.host} empty batch "
                f"({len(records)} records, {result.skipped} skipped), nothing forwarded"
            )
            return result

        self.writer.submit(result.payload, self.host)
        return result

    async def run(self):
        await self.websocket.accept()
        logger.info(f"[INGEST] new connection from {self.peer} {self.host}")

        if not self.host:
            logger.warning(f"[INGEST] {self.peer} connected without client id")
            await self.websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="missing client id")
            return

        while True:
            message = await self.websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.info(f"[INGEST] {self.peer} {self.host} disconnected")
                return

            text = message.get("text")
            if text is None:
                logger.warning(f"[INGEST] {self.peer} {self.host} ignoring binary message")
                continue

            logger.debug(f"[INGEST] received {self.peer} {self.host}")
            try:
                self.handle_message(text)
            except (ParseError, RecordStructureError) as e:
                if self.policy is Policy.LENIENT:
                    logger.warning(f"[INGEST] {self.peer} {self.host} dropping message: {e}")
                    continue

                logger.warning(f"[INGEST] {self.peer} {self.host} closing connection: {e}")
                await self.websocket.close(
                    code=status.WS_1007_INVALID_FRAME_PAYLOAD_DATA,
                    reason=close_reason(e),
                )
                return


@router.websocket("/{client_id:path}")
async def ingest(
    websocket: WebSocket,
    client_id: str,
    settings: Settings = Depends(get_settings),
    writer: LineProtocolWriter = Depends(get_writer),
):
    """Telemetry stream of one car; the path is its client id."""
    await IngestSession(websocket, client_id, settings, writer).run()
