"""Map for the 944 Warehouse Stock Transfer Receipt Advice.

Element names follow the X12 004010 element dictionary. Empty names mark
element positions the map does not expose.
"""

from __future__ import annotations

from collections.abc import Sequence

from x12map.mapping.descriptors import FieldMap, LoopMap

ISA_ELEMENTS = [
    "AuthorizationInformationQualifier",
    "AuthorizationInformation",
    "SecurityInformationQualifier",
    "SecurityInformation",
    "InterchangeSenderIdQualifier",
    "InterchangeSenderId",
    "InterchangeReceiverIdQualifier",
    "InterchangeReceiverId",
    "InterchangeDate",
    "InterchangeTime",
    "InterchangeControlStandardsIdentifier",
    "InterchangeControlVersionNumber",
    "InterchangeControlNumber",
    "AcknowledgmentRequested",
    "UsageIndicator",
    "ComponentElementSeparator",
]
GS_ELEMENTS = [
    "FunctionalIdentifierCode",
    "ApplicationSendersCode",
    "ApplicationReceiversCode",
    "Date",
    "Time",
    "GroupControlNumber",
    "ResponsibleAgencyCode",
    "VersionReleaseIndustryIdentifierCode",
]
ST_ELEMENTS = ["TransactionSetIdentifierCode", "TransactionSetControlNumber"]
W17_ELEMENTS = [
    "ReportingCode",
    "Date",
    "ReceiptNumber",
    "DepositorOrderNumber",
    "ShipmentIdentificationNumber",
]
N1_ELEMENTS = [
    "EntityIdentifierCode",
    "Name",
    "IdentificationCodeQualifier",
    "IdentificationCode",
    "EntityRelationshipCode",
    "RelatedEntityIdentifierCode",
]
W07_ELEMENTS = [
    "Quantity",
    "UnitOrBasisForMeasurementCode",
    "UPCCaseCode",
    "ProductOrServiceIdQualifier",
    "ProductOrServiceId",
    "SecondaryProductOrServiceIdQualifier",
    "SecondaryProductOrServiceId",
    "LotNumber",
]
W20_ELEMENTS = ["", "", "", "Weight", "WeightQualifier", "WeightUnitCode"]
W13_ELEMENTS = [
    "Quantity",
    "UnitOrBasisForMeasurementCode",
    "ReceivingConditionCode",
    "",
    "DamageReasonCode",
]
W14_ELEMENTS = ["QuantityReceived", "NumberOfUnitsShipped", "QuantityDamagedOrDefective"]
SE_ELEMENTS = ["NumberOfIncludedSegments", "TransactionSetControlNumber"]
GE_ELEMENTS = ["NumberOfTransactionSetsIncluded", "GroupControlNumber"]
IEA_ELEMENTS = ["NumberOfIncludedFunctionalGroups", "InterchangeControlNumber"]


def segment_map(
    segment_identifier: str,
    elements: Sequence[str],
    identifier_value: str | None = None,
    identifier_position: int | None = None,
) -> dict[str, FieldMap]:
    """One FieldMap per named element, keyed by element name."""
    return {
        name: FieldMap(
            segment_identifier=segment_identifier,
            value_position=index,
            identifier_position=identifier_position,
            identifier_value=identifier_value,
        )
        for index, name in enumerate(elements)
        if name
    }


TRANSACTION_944 = {
    "header": {
        "interchangeControlHeader": segment_map("ISA", ISA_ELEMENTS),
        "functionalGroupHeader": segment_map("GS", GS_ELEMENTS),
        "transactionSetHeader": segment_map("ST", ST_ELEMENTS),
        "depositor": segment_map("N1", N1_ELEMENTS, "DE", 0),
        "warehouse": segment_map("N1", N1_ELEMENTS, "WH", 0),
        "warehouseReceiptInformation": segment_map("W17", W17_ELEMENTS),
    },
    "detail": {
        "items": LoopMap(
            position=0,
            values={
                "item": segment_map("W07", W07_ELEMENTS),
                "miscellaneousDetails": segment_map("W20", W20_ELEMENTS),
                "detailException": segment_map("W13", W13_ELEMENTS),
            },
        ),
    },
    "summary": {
        "transactionTotals": segment_map("W14", W14_ELEMENTS),
        "transactionSetTrailer": segment_map("SE", SE_ELEMENTS),
        "functionalGroupTrailer": segment_map("GE", GE_ELEMENTS),
        "interchangeControlTrailer": segment_map("IEA", IEA_ELEMENTS),
    },
}

CATALOG = {"944": TRANSACTION_944}
