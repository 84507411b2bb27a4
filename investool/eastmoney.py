"""Client for the EastMoney company data service."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import requests

logger = logging.getLogger(__name__)

JBZL_URL = "https://emh5.eastmoney.com/api/GongSiGaiKuang/GetJiBenZiLiao"
CPBD_URL = "https://emh5.eastmoney.com/api/CaoPanBiDu/GetCaoPanBiDuPart2Get"
DEFAULT_TIMEOUT = 300.0


class EastMoneyError(Exception):
    """Raised when the EastMoney service fails or reports an error."""


@dataclass
class MainForm:
    """One item of a company's main business composition."""

    # 1: by industry, 2: by region, 3: by product
    type: str = ""
    main_form: str = ""
    main_income_ratio: str = ""
    main_income: str = ""
    main_income_ratio_chart: str = ""


@dataclass
class CompanyProfile:
    """Basic company information."""

    secucode: str = ""
    name: str = ""
    industry: str = ""
    concept: str = ""
    profile: str = ""
    main_business: str = ""
    keywords: list[str] = field(default_factory=list)
    main_forms: list[MainForm] = field(default_factory=list)

    def main_forms_string(self) -> str:
        """Describe the main business composition by industry, product and region."""
        groups: dict[str, list[MainForm]] = {}
        for form in self.main_forms:
            groups.setdefault(form.type, []).append(form)
        lines: list[str] = []
        for title, key in (("按行业:", "1"), ("按产品:", "3"), ("按地区:", "2")):
            lines.append(title)
            forms = groups.get(key, [])
            if forms:
                lines.extend(f"    {m.main_form}: {m.main_income_ratio}" for m in forms)
            else:
                lines.append("暂无数据")
        return "\n".join(lines)

    def profile_string(self) -> str:
        """Describe the company profile, main business and concepts."""
        return "\n".join(
            [
                "公司简介:",
                self.profile,
                "主营业务:",
                "    " + self.main_business,
                "所属概念:",
                "    " + self.concept,
            ]
        )

    def keywords_string(self) -> str:
        """Join the topic keywords with semicolons."""
        return ";".join(self.keywords)


class EastMoney:
    """EastMoney data source."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        begin = time.monotonic()
        logger.debug("EastMoney %s %s begin", method, url)
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise EastMoneyError(f"{method} {url}: {exc}") from exc
        finally:
            latency = (time.monotonic() - begin) * 1000
            logger.debug("EastMoney %s %s end latency(ms)=%d", method, url, latency)
        return data or {}

    def get_fc(self, secu_code: str) -> str:
        """Build the ``fc`` request parameter from a code such as 600519.SH."""
        code = secu_code.upper()
        if code.endswith(".SH"):
            return code.replace(".SH", "01")
        if code.endswith(".SZ"):
            return code.replace(".SZ", "02")
        return ""

    def query_company_profile(self, secu_code: str) -> CompanyProfile:
        """Fetch basic information, keywords and main business composition."""
        fc = self.get_fc(secu_code)

        basic = self._request_json("POST", JBZL_URL, json={"fc": fc})
        if basic.get("Status", 0) != 0:
            raise EastMoneyError(f"{secu_code} {basic.get('Message')!r}")
        info = (basic.get("Result") or {}).get("JiBenZiLiao") or {}
        profile = CompanyProfile(
            secucode=info.get("SecurityCode") or "",
            name=info.get("CompanyName") or "",
            industry=info.get("Industry") or "",
            concept=info.get("Block") or "",
            profile=info.get("CompRofile") or "",
            main_business=info.get("MainBusiness") or "",
        )

        brief = self._request_json("GET", CPBD_URL, params={"fc": fc})
        if brief.get("Status", 0) != 0:
            raise EastMoneyError(f"{secu_code} {brief.get('Message')!r}")
        result = brief.get("Result") or {}
        profile.keywords = [
            item.get("KeyWord") or "" for item in result.get("TiCaiXiangQingList") or []
        ]
        profile.main_forms = [
            MainForm(
                type=item.get("ReportType") or "",
                main_form=item.get("MainForm") or "",
                main_income=item.get("MainIncome") or "",
                main_income_ratio=item.get("MainIncomeRatio") or "",
                main_income_ratio_chart=item.get("MainIncomeRatioChart") or "",
            )
            for item in result.get("ZhuYingGouChengList") or []
        ]
        return profile