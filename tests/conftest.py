import pytest

from x12map.loop import Loop
from x12map.transaction import Transaction

EDI_944 = "\n".join(
    [
        "ISA*00*          *00*          *ZZ*SENDERID       *ZZ*RECEIVERID     "
        "*230929*1200*U*00401*000000001*0*P*>",
        "GS*RE*SENDERID*RECEIVERID*20230929*1200*1*X*004010",
        "ST*944*0001",
        "W17*F*20230929*4280*PO5512*SH99812",
        "N1*WH*Distribution Center*9*PC1234",
        "W08*X*REF123***PP*ABCD",
        "W07*10*CA**VN*100000154***22413962",
        "N9*PC*20230901",
        "W20****250*G*LB",
        "W07*12*CA**VN*100000155***22413963",
        "N9*PC*20230902",
        "W20****300*G*LB",
        "W07*8*CA**VN*100000156***22413964",
        "N9*PC*20230903",
        "W20****200*G*LB",
        "W07*5*CA**VN*100000157***22413965",
        "N9*PC*20230904",
        "W20****125*G*LB",
        "W07*15*CA**VN*100000158***22413966",
        "N9*PC*20230905",
        "W20****375*G*LB",
        "W14*50",
        "SE*21*0001",
        "GE*1*1",
        "IEA*1*000000001",
    ]
)

EDI_990 = "\n".join(
    [
        "ISA*00*          *00*          *ZZ*CARRIER        *ZZ*SHIPPER        "
        "*231002*0830*U*00401*000000002*0*P*>",
        "GS*GF*CARRIER*SHIPPER*20231002*0830*2*X*004010",
        "ST*990*0001",
        "B1*SCAC*SHIP001*20231002*A",
        "N9*CN*3216547",
        "N9*CI*AUGBIX2",
        "N9*CA*ABC Hauling STAR USA",
        "V9*EBA",
        "SE*7*0001",
        "ST*990*0002",
        "B1*SCAC*SHIP002*20231002*D",
        "N9*CN*3216548",
        "N9*CI*AUGBIX3",
        "N9*CA*Rapid Freight",
        "V9*EBD",
        "SE*7*0002",
        "ST*990*0003",
        "B1*SCAC*SHIP003*20231003*A",
        "N9*CN*3216549",
        "N9*CI*AUGBIX4",
        "N9*CA*Lone Star Carriers",
        "V9*EBA",
        "SE*7*0003",
        "GE*3*2",
        "IEA*1*000000002",
    ]
)

TENDER_LOOP = ["ST", "B1", "N9", "N9", "N9", "V9", "SE"]


@pytest.fixture
def edi_944() -> str:
    return EDI_944


@pytest.fixture
def edi_990() -> str:
    return EDI_990


@pytest.fixture
def receipt() -> Transaction:
    """944 with the W07/N9/W20 item loop registered and run."""
    transaction = Transaction.from_text(EDI_944)
    transaction.add_loop(Loop(position=0).add_segment_identifiers(["W07", "N9", "W20"]))
    transaction.run_loops()
    return transaction


@pytest.fixture
def tender() -> Transaction:
    """990 with one loop per ST..SE transaction set."""
    transaction = Transaction.from_text(EDI_990)
    transaction.add_loop(Loop(position=0).add_segment_identifiers(TENDER_LOOP))
    transaction.run_loops()
    return transaction
