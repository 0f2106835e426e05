import logging

from x12map.mapping.descriptors import FieldMap, LoopMap, NodeKind, RepeatingSegmentMap, classify
from x12map.mapping.reviver import contains_type_keys, dump_map, revive_map
from x12map.maps.ts944 import TRANSACTION_944

PLAIN_MAP = {
    "envelope": {
        "transactions": {
            "_type": "LoopMap",
            "position": 0,
            "values": {
                "B1": {
                    "scac": {"_type": "FieldMap", "segmentIdentifier": "B1", "valuePosition": 0},
                },
                "references": {
                    "_type": "RepeatingSegmentMap",
                    "segmentIdentifier": "N9",
                    "values": {
                        "qualifier": {
                            "_type": "FieldMap",
                            "segmentIdentifier": "N9",
                            "valuePosition": 0,
                        },
                    },
                },
                "source": "EDI_SYSTEM",
            },
        },
    },
}


def test_revive_builds_descriptors():
    revived = revive_map(PLAIN_MAP)
    loop_map = revived["envelope"]["transactions"]
    assert isinstance(loop_map, LoopMap)
    assert loop_map.position == 0
    assert loop_map.values["B1"]["scac"] == FieldMap("B1", 0)
    references = loop_map.values["references"]
    assert isinstance(references, RepeatingSegmentMap)
    assert references.values["qualifier"] == FieldMap("N9", 0)
    assert loop_map.values["source"] == "EDI_SYSTEM"


def test_revive_is_idempotent():
    once = revive_map(PLAIN_MAP)
    assert revive_map(once) == once


def test_revive_accepts_snake_case_and_qualifiers():
    revived = revive_map(
        {
            "_type": "FieldMap",
            "segment_identifier": "N1",
            "value_position": 1,
            "identifier_position": 0,
            "identifier_value": "WH",
        }
    )
    assert revived == FieldMap("N1", 1, identifier_position=0, identifier_value="WH")
    assert revived.qualified


def test_unknown_type_degrades_to_group(caplog):
    with caplog.at_level(logging.WARNING):
        revived = revive_map(
            {
                "x": {
                    "_type": "SegmentMap",
                    "inner": {"_type": "FieldMap", "segmentIdentifier": "ST", "valuePosition": 0},
                }
            }
        )
    assert classify(revived["x"]) is NodeKind.GROUP
    assert revived["x"]["inner"] == FieldMap("ST", 0)
    assert "SegmentMap" in caplog.text


def test_lists_are_revived_element_wise():
    revived = revive_map([{"_type": "FieldMap", "segmentIdentifier": "ST", "valuePosition": 1}, 3])
    assert revived == [FieldMap("ST", 1), 3]


def test_contains_type_keys():
    assert contains_type_keys(PLAIN_MAP)
    assert contains_type_keys([{"a": [{"_type": "FieldMap"}]}])
    assert not contains_type_keys({"a": {"b": "c"}, "d": [1, 2]})
    assert not contains_type_keys(TRANSACTION_944)


def test_dump_map_round_trips_catalog():
    dumped = dump_map(TRANSACTION_944)
    assert contains_type_keys(dumped)
    warehouse_name = dumped["header"]["warehouse"]["Name"]
    assert warehouse_name == {
        "_type": "FieldMap",
        "segmentIdentifier": "N1",
        "valuePosition": 1,
        "identifierPosition": 0,
        "identifierValue": "WH",
    }
    assert revive_map(dumped) == TRANSACTION_944


def test_classify_priority():
    assert classify({}) is NodeKind.GROUP
    assert classify(FieldMap("ST", 0)) is NodeKind.FIELD
    assert classify(LoopMap(0)) is NodeKind.LOOP
    assert classify(RepeatingSegmentMap("N9")) is NodeKind.REPEATING
    assert classify(True) is NodeKind.LITERAL
    assert classify(1.5) is NodeKind.LITERAL
    assert classify(None) is NodeKind.INERT
    assert classify([1]) is NodeKind.INERT
