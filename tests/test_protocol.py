"""
Unit tests for the Sans-I/O protocol layer.

These tests verify protocol logic without any HTTP mocking required.
All tests are pure - they test data transformations only.
"""

import logging
from datetime import datetime, timezone

import pytest
from lxml import etree

from ewsbooking.protocol import (
    # Types
    EWSOperation,
    EWSRequest,
    ItemId,
    # Builders
    build_find_item_body,
    build_get_item_body,
    format_timestamp,
    # Parsers
    node_to_mapping,
    parse_calendar_item,
    parse_calendar_items,
    parse_item_ids,
    # Protocol
    EWSProtocol,
)

TNS = "http://schemas.microsoft.com/exchange/services/2006/types"
MNS = "http://schemas.microsoft.com/exchange/services/2006/messages"


def element(xml):
    return etree.fromstring(xml)


class TestEWSTypes:
    """Test core EWS types."""

    def test_ews_request_immutable(self):
        """EWSRequest should be immutable (frozen dataclass)."""
        request = EWSRequest(operation=EWSOperation.GET_ITEM, body="<GetItem/>")
        with pytest.raises(AttributeError):
            request.body = "<FindItem/>"

    def test_soap_action(self):
        assert EWSOperation.GET_ITEM.soap_action == MNS + "/GetItem"
        assert EWSOperation("FindItem") is EWSOperation.FIND_ITEM


class TestXMLBuilders:
    """Test XML building functions."""

    def test_build_get_item_body(self):
        """GetItem should carry the ids and request the booking fields."""
        body = build_get_item_body("AAMkAD1", "DwAAAB1")
        root = element(body)
        assert root.tag == "{%s}GetItem" % MNS

        item_id = root.find("{%s}ItemIds/{%s}ItemId" % (MNS, TNS))
        assert item_id.get("Id") == "AAMkAD1"
        assert item_id.get("ChangeKey") == "DwAAAB1"

        assert root.findtext("{%s}ItemShape/{%s}BaseShape" % (MNS, TNS)) == "IdOnly"
        assert root.findtext("{%s}ItemShape/{%s}BodyType" % (MNS, TNS)) == "Text"
        field_uris = [
            x.get("FieldURI")
            for x in root.iter("{%s}FieldURI" % TNS)
        ]
        assert field_uris == [
            "calendar:IsAllDayEvent",
            "calendar:End",
            "calendar:Start",
            "calendar:Location",
            "item:Subject",
            "item:Body",
        ]

    def test_build_get_item_body_without_change_key(self):
        body = build_get_item_body("AAMkAD1", None)
        assert "ChangeKey" not in body
        assert 'Id="AAMkAD1"' in body

    def test_build_get_item_body_escapes_attributes(self):
        """Ids are escaped, so the body stays well-formed."""
        body = build_get_item_body('a"b<c', "d&e")
        item_id = element(body).find("{%s}ItemIds/{%s}ItemId" % (MNS, TNS))
        assert item_id.get("Id") == 'a"b<c'
        assert item_id.get("ChangeKey") == "d&e"

    def test_build_find_item_body(self):
        """FindItem should name the resource and the calendar view range."""
        t0 = 1704103200
        t1 = 1704189600
        body = build_find_item_body("room@example.com", t0, t1)

        assert "<t:EmailAddress>room@example.com</t:EmailAddress>" in body
        assert 'StartDate="2024-01-01T10:00:00+00:00"' in body
        assert 'EndDate="2024-01-02T10:00:00+00:00"' in body

        root = element(body)
        assert root.tag == "{%s}FindItem" % MNS
        assert root.get("Traversal") == "Shallow"
        assert root.findtext("{%s}ItemShape/{%s}BaseShape" % (MNS, TNS)) == "IdOnly"
        ## only ids are asked for
        assert root.find(".//{%s}AdditionalProperties" % TNS) is None
        folder = root.find("{%s}ParentFolderIds/{%s}DistinguishedFolderId" % (MNS, TNS))
        assert folder.get("Id") == "calendar"

    def test_format_timestamp(self):
        assert format_timestamp(0) == "1970-01-01T00:00:00+00:00"
        assert format_timestamp(1704103200.7) == "2024-01-01T10:00:00+00:00"
        assert format_timestamp(datetime(2024, 1, 1, 10)) == "2024-01-01T10:00:00+00:00"
        assert (
            format_timestamp(datetime(2024, 1, 1, 10, tzinfo=timezone.utc))
            == "2024-01-01T10:00:00+00:00"
        )

    def test_format_timestamp_numeric_string(self):
        """Timestamps from the environment or a config file are strings."""
        assert format_timestamp("1704067200") == "2024-01-01T00:00:00+00:00"
        body = build_find_item_body("room@example.com", "1704067200", 1704153600)
        assert 'StartDate="2024-01-01T00:00:00+00:00"' in body

    @pytest.mark.parametrize(
        "value,rendered",
        [
            (float("nan"), "nan"),
            (1e20, "1e+20"),
            ("next tuesday", "next tuesday"),
        ],
    )
    def test_format_timestamp_unrenderable(self, value, rendered, caplog):
        """Bad timestamps are logged and rendered as is, never raised."""
        with caplog.at_level(logging.WARNING):
            body = build_find_item_body("room@example.com", value, 1704067200)
        assert 'StartDate="%s"' % rendered in body
        assert 'EndDate="2024-01-01T00:00:00+00:00"' in body
        assert "can not render timestamp" in caplog.text


class TestNodeToMapping:
    """Test the generic element to mapping conversion."""

    def test_distinct_children_and_attributes(self):
        """N distinct children plus attributes give as many entries."""
        node = element(
            """<t:CalendarItem xmlns:t="%s" Sensitivity="Normal">
              <t:ItemId Id="AAMkAD1" ChangeKey="DwAAAB1"/>
              <t:Subject>Meeting A</t:Subject>
              <t:Location>Room 1</t:Location>
              <t:Start>2024-01-01T10:00:00Z</t:Start>
            </t:CalendarItem>"""
            % TNS
        )
        mapping = node_to_mapping(node)
        assert mapping == {
            "@Sensitivity": "Normal",
            "ItemId": {"@Id": "AAMkAD1", "@ChangeKey": "DwAAAB1"},
            "Subject": "Meeting A",
            "Location": "Room 1",
            "Start": "2024-01-01T10:00:00Z",
        }

    def test_leaf_text_verbatim(self):
        node = element("<Item><Body>  line one\nline two  </Body></Item>")
        assert node_to_mapping(node) == {"Body": "  line one\nline two  "}

    def test_leaf_with_attributes_collapses_to_text(self):
        node = element('<Item><Body BodyType="Text">Agenda</Body></Item>')
        assert node_to_mapping(node) == {"Body": "Agenda"}

    def test_nested(self):
        node = element(
            """<Item>
                 <Organizer><Mailbox><Name>Ann</Name></Mailbox></Organizer>
               </Item>"""
        )
        assert node_to_mapping(node) == {
            "Organizer": {"Mailbox": {"Name": "Ann"}}
        }

    def test_empty_children_are_skipped(self):
        node = element('<Item><Body/><Subject>S</Subject><Body2 Type="x"/></Item>')
        assert node_to_mapping(node) == {"Subject": "S", "Body2": {"@Type": "x"}}

    def test_empty_element_is_skipped(self):
        assert node_to_mapping(element("<Item/>")) is None
        assert node_to_mapping(element("<Item>\n  </Item>")) is None

    def test_whitespace_text_is_skipped(self):
        assert node_to_mapping("   \n\t ") is None
        assert node_to_mapping("") is None

    def test_text_node(self):
        node = element("<Item><Subject>Meeting A</Subject></Item>")
        (text,) = node.xpath("//Subject/text()")
        assert node_to_mapping(text) == "Meeting A"

    def test_not_a_node(self):
        assert node_to_mapping(None) is None
        assert node_to_mapping(42) is None
        assert node_to_mapping(etree.Comment("a comment")) is None

    def test_comments_are_ignored(self):
        node = element("<Item><!-- note --><Subject>S</Subject></Item>")
        assert node_to_mapping(node) == {"Subject": "S"}

    def test_sibling_collision_last_wins(self):
        """Repeated sibling names are not accumulated; the last one wins."""
        node = element(
            "<Item><Category>red</Category><Category>blue</Category></Item>"
        )
        assert node_to_mapping(node) == {"Category": "blue"}


class TestXMLParsers:
    """Test XML parsing functions."""

    def test_parse_calendar_item(self, get_item_response):
        xml = get_item_response(Subject="Meeting A", IsAllDayEvent="false")
        item = parse_calendar_item(xml)
        assert item["Subject"] == "Meeting A"
        assert item["IsAllDayEvent"] == "false"
        assert item["ItemId"] == {"@Id": "AAMkAD1", "@ChangeKey": "DwAAAB1"}

    def test_parse_calendar_item_bytes(self, get_item_response):
        xml = get_item_response(Subject="Bringebærsyltetøy").encode("utf-8")
        assert parse_calendar_item(xml)["Subject"] == "Bringebærsyltetøy"

    def test_parse_calendar_item_none(self, find_item_response):
        assert parse_calendar_item(find_item_response()) is None

    def test_parse_calendar_item_error_logged(self, get_item_error_response, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_calendar_item(get_item_error_response) is None
        assert "ErrorItemNotFound" in caplog.text

    def test_parse_calendar_items(self, find_item_response):
        xml = find_item_response(("id1", "ck1"), ("id2", "ck2"))
        items = parse_calendar_items(xml)
        assert items == [
            {"ItemId": {"@Id": "id1", "@ChangeKey": "ck1"}},
            {"ItemId": {"@Id": "id2", "@ChangeKey": "ck2"}},
        ]

    def test_parse_item_ids(self, find_item_response):
        xml = find_item_response(("id1", "ck1"), ("id2", "ck2"))
        assert parse_item_ids(xml) == [ItemId("id1", "ck1"), ItemId("id2", "ck2")]

    def test_parse_item_ids_empty(self, find_item_response):
        assert parse_item_ids(find_item_response()) == []

    def test_parse_item_ids_skips_items_without_id(self, caplog):
        xml = """<m:Items xmlns:m="%s" xmlns:t="%s">
              <t:CalendarItem><t:Subject>no id</t:Subject></t:CalendarItem>
              <t:CalendarItem/>
              <t:CalendarItem><t:ItemId Id="id3"/></t:CalendarItem>
            </m:Items>""" % (MNS, TNS)
        with caplog.at_level(logging.WARNING):
            assert parse_item_ids(xml) == [ItemId("id3", None)]
        assert "without ItemId" in caplog.text

    def test_parse_invalid_xml(self):
        with pytest.raises(etree.XMLSyntaxError):
            parse_calendar_item("<not xml")


class TestEWSProtocol:
    """Test the request/response round trip of EWSProtocol."""

    def test_get_item_request(self):
        request = EWSProtocol().get_item_request("id1", "ck1")
        assert request.operation is EWSOperation.GET_ITEM
        assert request.impersonation is None
        assert 'Id="id1"' in request.body

    def test_find_item_request_impersonation(self):
        request = EWSProtocol().find_item_request(
            "room@example.com", 0, 3600, impersonation="room@example.com"
        )
        assert request.operation is EWSOperation.FIND_ITEM
        assert request.impersonation == "room@example.com"

    def test_parse(self, find_item_response, get_item_response):
        protocol = EWSProtocol()
        assert protocol.parse_find_item(find_item_response(("id1", "ck1"))) == [
            ItemId("id1", "ck1")
        ]
        assert protocol.parse_get_item(get_item_response(Subject="S"))["Subject"] == "S"
