import pytest

TS = 1700000000123

FRONT = [36.5, 42.0, [100, 12.5, 1.5, 0], [-100, -12.5, 1.25, 3]]


@pytest.fixture
def full_record() -> list:
    """A record with every slot filled except the back controller."""
    return [5000, TS, 100, -60, 1200, 800, 0.5, 0.25, list(FRONT), None]


@pytest.fixture
def full_record_lines() -> list[str]:
    return [
        f"system,host=car1 uptime=5000,freememory8=100,rssi=-60 {TS}\n",
        f"inputs,host=car1,type=potis,kind=raw gas=1200,brems=800 {TS}\n",
        f"inputs,host=car1,type=potis,kind=processed gas=0.5,brems=0.25 {TS}\n",
        f"measure,host=car1,board=front voltage=36.5,temperature=42.0 {TS}\n",
        f"command,host=car1,board=front,side=left inputTgt=100 {TS}\n",
        f"measure,host=car1,board=front,side=left speed=12.5,current=1.5,error=0 {TS}\n",
        f"command,host=car1,board=front,side=right inputTgt=-100 {TS}\n",
        f"measure,host=car1,board=front,side=right speed=-12.5,current=1.25,error=3 {TS}\n",
    ]
