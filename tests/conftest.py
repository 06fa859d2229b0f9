"""
EWS response documents shared by the unit tests.
"""
import pytest

ENVELOPE = """<?xml version="1.0" encoding="utf-8"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">
  <s:Header>
    <h:ServerVersionInfo xmlns:h="http://schemas.microsoft.com/exchange/services/2006/types"
        MajorVersion="14" MinorVersion="3" MajorBuildNumber="123" MinorBuildNumber="3"/>
  </s:Header>
  <s:Body xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
          xmlns:xsd="http://www.w3.org/2001/XMLSchema">
    %s
  </s:Body>
</s:Envelope>
"""

FIND_ITEM_RESPONSE = """<m:FindItemResponse
        xmlns:m="http://schemas.microsoft.com/exchange/services/2006/messages"
        xmlns:t="http://schemas.microsoft.com/exchange/services/2006/types">
      <m:ResponseMessages>
        <m:FindItemResponseMessage ResponseClass="Success">
          <m:ResponseCode>NoError</m:ResponseCode>
          <m:RootFolder TotalItemsInView="%i" IncludesLastItemInRange="true">
            <t:Items>
              %s
            </t:Items>
          </m:RootFolder>
        </m:FindItemResponseMessage>
      </m:ResponseMessages>
    </m:FindItemResponse>"""

GET_ITEM_RESPONSE = """<m:GetItemResponse
        xmlns:m="http://schemas.microsoft.com/exchange/services/2006/messages"
        xmlns:t="http://schemas.microsoft.com/exchange/services/2006/types">
      <m:ResponseMessages>
        <m:GetItemResponseMessage ResponseClass="Success">
          <m:ResponseCode>NoError</m:ResponseCode>
          <m:Items>
            <t:CalendarItem>
              <t:ItemId Id="%s" ChangeKey="%s"/>
              %s
            </t:CalendarItem>
          </m:Items>
        </m:GetItemResponseMessage>
      </m:ResponseMessages>
    </m:GetItemResponse>"""

GET_ITEM_ERROR_RESPONSE = """<m:GetItemResponse
        xmlns:m="http://schemas.microsoft.com/exchange/services/2006/messages"
        xmlns:t="http://schemas.microsoft.com/exchange/services/2006/types">
      <m:ResponseMessages>
        <m:GetItemResponseMessage ResponseClass="Error">
          <m:MessageText>The specified object was not found in the store.</m:MessageText>
          <m:ResponseCode>ErrorItemNotFound</m:ResponseCode>
          <m:DescriptiveLinkKey>0</m:DescriptiveLinkKey>
          <m:Items/>
        </m:GetItemResponseMessage>
      </m:ResponseMessages>
    </m:GetItemResponse>"""


@pytest.fixture
def find_item_response():
    """FindItem response listing the given (id, change key) pairs"""

    def make(*item_ids):
        items = "\n".join(
            '<t:CalendarItem><t:ItemId Id="%s" ChangeKey="%s"/></t:CalendarItem>'
            % item_id
            for item_id in item_ids
        )
        return ENVELOPE % (FIND_ITEM_RESPONSE % (len(item_ids), items))

    return make


@pytest.fixture
def get_item_response():
    """GetItem response for one CalendarItem with the given child elements"""

    def make(item_id="AAMkAD1", change_key="DwAAAB1", **fields):
        children = "\n".join(
            "<t:%s>%s</t:%s>" % (name, value, name) for name, value in fields.items()
        )
        return ENVELOPE % (GET_ITEM_RESPONSE % (item_id, change_key, children))

    return make


@pytest.fixture
def get_item_error_response():
    return ENVELOPE % GET_ITEM_ERROR_RESPONSE
