"""Cash flow statement data from the EastMoney finance analysis service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from investool.eastmoney import EastMoney, EastMoneyError

CASHFLOW_URL = "https://datacenter.eastmoney.com/securities/api/data/get"

_TEXT_FIELDS = {
    "SECUCODE": "secucode",
    "SECURITY_CODE": "security_code",
    "SECURITY_NAME_ABBR": "security_name_abbr",
    "ORG_CODE": "org_code",
    "ORG_TYPE": "org_type",
    "REPORT_DATE": "report_date",
    "REPORT_TYPE": "report_type",
    "REPORT_DATE_NAME": "report_date_name",
    "SECURITY_TYPE_CODE": "security_type_code",
    "NOTICE_DATE": "notice_date",
    "UPDATE_DATE": "update_date",
    "CURRENCY": "currency",
    "OPINION_TYPE": "opinion_type",
    "OSOPINION_TYPE": "osopinion_type",
}

_NUMBER_FIELDS = {
    "NETCASH_OPERATE": "netcash_operate",
    "NETCASH_INVEST": "netcash_invest",
    "NETCASH_FINANCE": "netcash_finance",
    "NETPROFIT": "netprofit",
    "CONSTRUCT_LONG_ASSET": "construct_long_asset",
    "TOTAL_OPERATE_INFLOW": "total_operate_inflow",
    "TOTAL_OPERATE_OUTFLOW": "total_operate_outflow",
    "CCE_ADD": "cce_add",
    "BEGIN_CCE": "begin_cce",
    "END_CCE": "end_cce",
}


def _to_float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass
class CashflowData:
    """One period of a company's cash flow statement.

    The most used items are attributes; every numeric item of the statement,
    keyed by its service name (e.g. ``SALES_SERVICES_YOY``), is in ``values``.
    """

    secucode: str = ""
    security_code: str = ""
    security_name_abbr: str = ""
    org_code: str = ""
    org_type: str = ""
    report_date: str = ""
    report_type: str = ""
    report_date_name: str = ""
    security_type_code: str = ""
    notice_date: str = ""
    update_date: str = ""
    currency: str = ""
    opinion_type: str = ""
    osopinion_type: str = ""
    # 经营活动产生的现金流量净额
    netcash_operate: float = 0.0
    # 投资活动产生的现金流量净额
    netcash_invest: float = 0.0
    # 筹资活动产生的现金流量净额
    netcash_finance: float = 0.0
    netprofit: float = 0.0
    construct_long_asset: float = 0.0
    total_operate_inflow: float = 0.0
    total_operate_outflow: float = 0.0
    cce_add: float = 0.0
    begin_cce: float = 0.0
    end_cce: float = 0.0
    values: dict[str, float] = field(default_factory=dict)

    def __getitem__(self, key: str) -> float:
        """Return a numeric statement item by its service name, 0.0 if absent."""
        return self.values.get(key.upper(), 0.0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CashflowData":
        kwargs: dict[str, Any] = {
            attr: _to_text(data.get(key)) for key, attr in _TEXT_FIELDS.items()
        }
        values = {
            key: _to_float(value)
            for key, value in data.items()
            if key not in _TEXT_FIELDS
        }
        kwargs.update(
            {attr: values.get(key, 0.0) for key, attr in _NUMBER_FIELDS.items()}
        )
        return cls(values=values, **kwargs)


def parse_cashflow(data: Any) -> list[CashflowData]:
    """Parse the ``result.data`` rows of a cash flow response."""
    return [CashflowData.from_dict(row) for row in data or [] if isinstance(row, dict)]


def query_fina_cashflow_data(client: EastMoney, secu_code: str) -> list[CashflowData]:
    """Fetch cash flow statements of a stock, latest report first."""
    params = {
        "source": "HSF10",
        "client": "APP",
        "type": "RPT_F10_FINANCE_GCASHFLOW",
        "sty": "APP_F10_GCASHFLOW",
        "filter": f'(SECUCODE="{secu_code.upper()}")',
        "ps": "10",
        "sr": "-1",
        "st": "REPORT_DATE",
    }
    resp = client._request_json("GET", CASHFLOW_URL, params=params)
    if resp.get("code", 0) != 0:
        raise EastMoneyError(f"{secu_code} {resp!r}")
    result = resp.get("result") or {}
    return parse_cashflow(result.get("data"))