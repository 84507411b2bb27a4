import datetime as dt
import re

import pytest
import responses

from investool.chinabond import (
    AAA_COMPANY_BOND,
    ChinaBond,
    ChinaBondError,
    TreeItem,
    latest_weekday,
)

AAA_ID = "5781a1ff7651967e0176978d957b7346"
TREE_RE = re.compile(r"https://yield\.chinabond\.com\.cn/cbweb-mn/yc/queryTree.*")
FXSYL_RE = re.compile(r"https://yield\.chinabond\.com\.cn/cbweb-mn/yc/searchXyFxsyl.*")

TREE_BODY = [
    {"id": "root", "pId": "", "name": "中债曲线", "isParent": "true",
     "open": "true", "checked": False, "font": None},
    {"id": AAA_ID, "pId": "root", "name": AAA_COMPANY_BOND, "isParent": "false",
     "open": "false", "checked": True, "font": {"color": "red"}},
]

FXSYL_BODY = {
    "ycChartDataList": [
        {"ycDefId": AAA_ID, "ycDefName": AAA_COMPANY_BOND, "worktime": "2021-11-19",
         "seriesData": [[0.0, 2.35], [1.0, 2.6]], "isPoint": False,
         "hyCurve": False, "point": False}
    ],
    "chartDataList": None,
    "upThrow": 0,
    "downThrow": 0,
    "upOffset": 0,
    "downOffset": 0,
}


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_latest_weekday_keeps_weekday():
    assert latest_weekday(dt.date(2021, 11, 19)) == "2021-11-19"


@pytest.mark.parametrize("day", [dt.date(2021, 11, 20), dt.date(2021, 11, 21)])
def test_latest_weekday_steps_back_from_weekend(day):
    assert latest_weekday(day) == "2021-11-19"


def test_tree_item_from_dict():
    item = TreeItem.from_dict(TREE_BODY[1])
    assert item.id == AAA_ID
    assert item.pid == "root"
    assert item.checked is True
    assert item.font == {"color": "red"}


def test_query_tree(mocked):
    mocked.add(responses.GET, TREE_RE, json=TREE_BODY)
    results = ChinaBond().query_tree()
    assert len(results) == 2
    assert results[AAA_COMPANY_BOND] == AAA_ID
    assert mocked.calls[0].request.headers["User-Agent"]


def test_query_tree_http_error(mocked):
    mocked.add(responses.GET, TREE_RE, status=500)
    with pytest.raises(ChinaBondError):
        ChinaBond().query_tree()


def test_query_fxsyl(mocked):
    mocked.add(responses.POST, FXSYL_RE, json=FXSYL_BODY)
    results = ChinaBond().query_fxsyl(AAA_ID, "2021-11-19")
    assert results == [[0.0, 2.35], [1.0, 2.6]]
    assert results[0][1] == 2.35
    request = mocked.calls[0].request
    assert "workTimes=2021-11-19" in request.url
    assert AAA_ID in request.url
    assert request.headers["Content-Type"] == "application/json"


def test_query_fxsyl_empty(mocked):
    mocked.add(responses.POST, FXSYL_RE, json={"ycChartDataList": []})
    assert ChinaBond().query_fxsyl(AAA_ID, "2021-11-19") == []


def test_query_current_syl(mocked):
    mocked.add(responses.GET, TREE_RE, json=TREE_BODY)
    mocked.add(responses.POST, FXSYL_RE, json=FXSYL_BODY)
    assert ChinaBond().query_current_syl(AAA_COMPANY_BOND, "2021-11-19") == 2.35


def test_query_current_syl_unknown_name(mocked):
    mocked.add(responses.GET, TREE_RE, json=TREE_BODY)
    with pytest.raises(ChinaBondError, match="债券名称不存在"):
        ChinaBond().query_current_syl("不存在的曲线", "2021-11-19")


def test_query_current_syl_empty_data(mocked):
    mocked.add(responses.GET, TREE_RE, json=TREE_BODY)
    mocked.add(responses.POST, FXSYL_RE, json={"ycChartDataList": None})
    with pytest.raises(ChinaBondError, match="收益率数据为空"):
        ChinaBond().query_current_syl(AAA_COMPANY_BOND, "2021-11-19")


def test_query_current_syl_bad_point(mocked):
    body = {"ycChartDataList": [{"seriesData": [[1.0, 2.0, 3.0]]}]}
    mocked.add(responses.GET, TREE_RE, json=TREE_BODY)
    mocked.add(responses.POST, FXSYL_RE, json=body)
    with pytest.raises(ChinaBondError, match="收益率数据异常"):
        ChinaBond().query_current_syl(AAA_COMPANY_BOND, "2021-11-19")


def test_query_aaa_company_bond_syl(mocked):
    mocked.add(responses.GET, TREE_RE, json=TREE_BODY)
    mocked.add(responses.POST, FXSYL_RE, json=FXSYL_BODY)
    assert ChinaBond().query_aaa_company_bond_syl() == 2.35


def test_query_aaa_company_bond_syl_returns_zero_on_error(mocked):
    mocked.add(responses.GET, TREE_RE, json=TREE_BODY[:1])
    assert ChinaBond().query_aaa_company_bond_syl() == 0.0