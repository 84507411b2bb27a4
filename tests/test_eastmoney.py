import json
import re

import pytest
import responses

from investool.eastmoney import CompanyProfile, EastMoney, EastMoneyError, MainForm

JBZL_RE = re.compile(r"https://emh5\.eastmoney\.com/api/GongSiGaiKuang/GetJiBenZiLiao.*")
CPBD_RE = re.compile(r"https://emh5\.eastmoney\.com/api/CaoPanBiDu/GetCaoPanBiDuPart2Get.*")

JBZL_BODY = {
    "Result": {
        "JiBenZiLiao": {
            "SecurityCode": "002459.SZ",
            "CompanyName": "示例能源股份有限公司",
            "Industry": "电力设备",
            "Block": "光伏概念",
            "CompRofile": "公司主要从事光伏产品的研发与生产。",
            "MainBusiness": "光伏组件",
        }
    },
    "Status": 0,
    "Message": "",
    "OtherInfo": {},
}

CPBD_BODY = {
    "Result": {
        "TiCaiXiangQingList": [{"KeyWord": "光伏"}, {"KeyWord": "储能"}],
        "ZhuYingGouChengList": [
            {"ReportType": "1", "MainForm": "光伏行业", "MainIncome": "100亿",
             "MainIncomeRatio": "95.00%", "MainIncomeRatioChart": "0.95"},
            {"ReportType": "2", "MainForm": "境外", "MainIncome": "60亿",
             "MainIncomeRatio": "60.00%", "MainIncomeRatioChart": "0.6"},
        ],
    },
    "Status": 0,
    "Message": None,
}


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.mark.parametrize(
    "code, expected",
    [
        ("002459.sz", "00245902"),
        ("600519.SH", "60051901"),
        ("600519", ""),
    ],
)
def test_get_fc(code, expected):
    assert EastMoney().get_fc(code) == expected


def test_main_forms_string_groups_and_placeholders():
    profile = CompanyProfile(
        main_forms=[
            MainForm(type="1", main_form="白酒", main_income_ratio="90%"),
            MainForm(type="1", main_form="其他", main_income_ratio="10%"),
            MainForm(type="2", main_form="国内", main_income_ratio="99%"),
        ]
    )
    assert profile.main_forms_string() == "\n".join(
        [
            "按行业:",
            "    白酒: 90%",
            "    其他: 10%",
            "按产品:",
            "暂无数据",
            "按地区:",
            "    国内: 99%",
        ]
    )


def test_profile_string():
    profile = CompanyProfile(profile="简介", main_business="业务", concept="概念")
    assert profile.profile_string() == "公司简介:\n简介\n主营业务:\n    业务\n所属概念:\n    概念"


def test_keywords_string():
    assert CompanyProfile(keywords=["a", "b", "c"]).keywords_string() == "a;b;c"
    assert CompanyProfile().keywords_string() == ""


def test_query_company_profile(mocked):
    mocked.add(responses.POST, JBZL_RE, json=JBZL_BODY)
    mocked.add(responses.GET, CPBD_RE, json=CPBD_BODY)
    data = EastMoney().query_company_profile("002459.sz")
    assert data.keywords == ["光伏", "储能"]
    assert len(data.main_forms) == 2
    assert data.main_forms[0].main_form == "光伏行业"
    assert data.main_forms[1].type == "2"
    assert data.secucode == "002459.SZ"
    assert data.name == "示例能源股份有限公司"
    assert data.industry == "电力设备"
    assert data.concept == "光伏概念"
    assert data.profile == "公司主要从事光伏产品的研发与生产。"
    assert data.main_business == "光伏组件"
    assert json.loads(mocked.calls[0].request.body) == {"fc": "00245902"}
    assert "fc=00245902" in mocked.calls[1].request.url


def test_query_company_profile_status_error(mocked):
    body = dict(JBZL_BODY, Status=-1, Message="bad code")
    mocked.add(responses.POST, JBZL_RE, json=body)
    with pytest.raises(EastMoneyError, match="bad code"):
        EastMoney().query_company_profile("002459.sz")


def test_query_company_profile_second_call_error(mocked):
    mocked.add(responses.POST, JBZL_RE, json=JBZL_BODY)
    mocked.add(responses.GET, CPBD_RE, json={"Status": 1, "Message": "denied"})
    with pytest.raises(EastMoneyError, match="denied"):
        EastMoney().query_company_profile("002459.sz")


def test_query_company_profile_http_error(mocked):
    mocked.add(responses.POST, JBZL_RE, status=502)
    with pytest.raises(EastMoneyError):
        EastMoney().query_company_profile("002459.sz")