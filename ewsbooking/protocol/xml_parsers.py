"""
Pure functions for parsing EWS XML responses.

All functions in this module are pure - they take XML in and return
structured data out, with no side effects or I/O (apart from logging).

Elements are converted generically with ``node_to_mapping`` into nested
dicts keyed by local name; attributes get an ``@`` prefix.
"""

import logging
from typing import List
from typing import Optional
from typing import Union

from lxml import etree
from lxml.etree import _Element

from ewsbooking.lib import error
from ewsbooking.lib.namespace import nsmap
from ewsbooking.lib.python_utilities import to_wire

from .types import ATTRIBUTE_PREFIX, ItemId, NodeMapping

log = logging.getLogger(__name__)

XMLInput = Union[str, bytes]


def node_to_mapping(node) -> Union[NodeMapping, str, None]:
    """
    Convert an XML node into a mapping.

    Attributes become ``"@" + local name`` keys.  A child element holding
    nothing but text collapses to its text (any attributes on it are
    dropped); other children are converted recursively.  When several
    siblings share a local name, the last one wins.

    Args:
        node: An lxml element, or a text string from an xpath query

    Returns:
        The mapping, the text for a text node, or None when the node
        should be skipped (not a node, whitespace-only text, or an
        element with neither attributes nor children worth keeping)
    """
    if isinstance(node, str):
        if not node.strip():
            return None
        return str(node)

    ## comments and processing instructions have a non-string tag
    if not isinstance(node, _Element) or not isinstance(node.tag, str):
        return None

    if not etree.QName(node).localname.strip():
        return None

    mapping: NodeMapping = {}
    for name, value in node.attrib.items():
        mapping[ATTRIBUTE_PREFIX + etree.QName(name).localname] = value

    for child in node.iterchildren(tag=etree.Element):
        child_name = etree.QName(child).localname
        if len(child) == 0 and child.text is not None:
            mapping[child_name] = child.text
        else:
            value = node_to_mapping(child)
            if value is not None:
                mapping[child_name] = value

    return mapping or None


def parse_calendar_item(
    xml: XMLInput,
    huge_tree: bool = False,
) -> Optional[NodeMapping]:
    """
    Parse a GetItem response.

    Args:
        xml: Raw XML response
        huge_tree: Allow parsing very large XML documents

    Returns:
        Mapping for the first CalendarItem, or None if there is none

    Raises:
        XMLSyntaxError: If xml is not valid XML
    """
    items = _calendar_item_elements(_parse(xml, huge_tree))
    if not items:
        return None
    return _item_mapping(items[0])


def parse_calendar_items(
    xml: XMLInput,
    huge_tree: bool = False,
) -> List[NodeMapping]:
    """
    Parse a FindItem response.

    Items returned by FindItem only carry what the IdOnly shape gives
    (essentially the ItemId), so full field population requires a
    follow-up GetItem per item.

    Args:
        xml: Raw XML response
        huge_tree: Allow parsing very large XML documents

    Returns:
        One mapping per CalendarItem, in document order
    """
    return [
        _item_mapping(item)
        for item in _calendar_item_elements(_parse(xml, huge_tree))
    ]


def parse_item_ids(
    xml: XMLInput,
    huge_tree: bool = False,
) -> List[ItemId]:
    """
    Parse a FindItem response into item id / change key pairs.

    CalendarItems without an ItemId are logged and skipped.
    """
    ids: List[ItemId] = []
    for item in parse_calendar_items(xml, huge_tree):
        item_id = item.get("ItemId")
        if not isinstance(item_id, dict) or not item_id.get("@Id"):
            error.weirdness("CalendarItem without ItemId", repr(item))
            continue
        ids.append(ItemId(id=item_id["@Id"], change_key=item_id.get("@ChangeKey")))
    return ids


def _parse(xml: XMLInput, huge_tree: bool = False) -> _Element:
    parser = etree.XMLParser(huge_tree=huge_tree)
    tree = etree.fromstring(to_wire(xml), parser)
    _log_response_messages(tree)
    return tree


def _calendar_item_elements(tree: _Element) -> List[_Element]:
    return tree.xpath("//t:CalendarItem", namespaces=nsmap)


def _item_mapping(item: _Element) -> NodeMapping:
    ## an empty <t:CalendarItem/> converts to the skip signal
    return node_to_mapping(item) or {}


def _log_response_messages(tree: _Element) -> None:
    """
    Exchange reports per-item failures inside an otherwise successful
    response.  Those are not raised, only logged; the affected items
    simply do not show up in the result.
    """
    for message in tree.xpath("//m:*[@ResponseClass]", namespaces=nsmap):
        response_class = message.get("ResponseClass")
        if response_class == "Success":
            continue
        code = message.findtext("m:ResponseCode", namespaces=nsmap)
        text = message.findtext("m:MessageText", namespaces=nsmap)
        log.warning(
            "%s in %s: %s %s",
            response_class,
            etree.QName(message).localname,
            code,
            text or "",
        )

