"""Client for the China bond yield curve service."""

from __future__ import annotations

import datetime as _dt
import logging
import random
import time
from dataclasses import dataclass
from typing import Any

import requests

logger = logging.getLogger(__name__)

TREE_URL = "https://yield.chinabond.com.cn/cbweb-mn/yc/queryTree?locale=zh_CN"
FXSYL_URL = (
    "https://yield.chinabond.com.cn/cbweb-mn/yc/searchXyFxsyl?xyzSelect=txy"
    "&&workTimes={date}&&dxbj=4&&qxll=1,&&yqqxN=N&&yqqxK=K"
    "&&ycDefIds={tree_item_id},&&locale=zh_CN"
)
AAA_COMPANY_BOND = "中债证券公司债收益率曲线(AAA)"
DEFAULT_TIMEOUT = 300.0

_USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/118.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_5) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/16.6 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64; rv:118.0) Gecko/20100101 Firefox/118.0",
)


def random_user_agent() -> str:
    """Return a browser user agent string picked at random."""
    return random.choice(_USER_AGENTS)


class ChinaBondError(Exception):
    """Raised when the bond service fails or returns unusable data."""


def latest_weekday(today: _dt.date | None = None) -> str:
    """Return the latest weekday on or before ``today`` as YYYY-mm-dd."""
    day = today or _dt.date.today()
    while day.weekday() >= 5:
        day -= _dt.timedelta(days=1)
    return day.strftime("%Y-%m-%d")


@dataclass
class TreeItem:
    """A node of the bond yield curve tree."""

    id: str = ""
    pid: str = ""
    name: str = ""
    is_parent: str = ""
    open: str = ""
    checked: bool = False
    font: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TreeItem":
        return cls(
            id=str(data.get("id") or ""),
            pid=str(data.get("pId") or ""),
            name=str(data.get("name") or ""),
            is_parent=str(data.get("isParent") or ""),
            open=str(data.get("open") or ""),
            checked=bool(data.get("checked", False)),
            font=data.get("font"),
        )


class ChinaBond:
    """Client for yield curve data of China bonds."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request_json(self, method: str, url: str, headers: dict[str, str]) -> Any:
        begin = time.monotonic()
        logger.debug("ChinaBond %s %s begin", method, url)
        try:
            resp = self.session.request(method, url, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise ChinaBondError(f"{method} {url}: {exc}") from exc
        finally:
            latency = (time.monotonic() - begin) * 1000
            logger.debug("ChinaBond %s %s end latency(ms)=%d", method, url, latency)
        return data

    def query_tree(self) -> dict[str, str]:
        """Return a mapping from curve name to its tree item id."""
        data = self._request_json("GET", TREE_URL, {"User-Agent": random_user_agent()})
        items = [TreeItem.from_dict(item) for item in data or []]
        return {item.name: item.id for item in items}

    def query_fxsyl(self, tree_item_id: str, date: str) -> list[list[float]]:
        """Return [[years, yield], ...] of a curve on the given YYYY-mm-dd date."""
        url = FXSYL_URL.format(date=date, tree_item_id=tree_item_id)
        headers = {
            "Content-Type": "application/json",
            "User-Agent": random_user_agent(),
        }
        data = self._request_json("POST", url, headers) or {}
        charts = data.get("ycChartDataList") or []
        if not charts:
            return []
        return [list(point) for point in charts[0].get("seriesData") or []]

    def query_current_syl(self, bond_name: str, date: str | None = None) -> float:
        """Return the current yield of the named bond curve."""
        tree_item_id = self.query_tree().get(bond_name, "")
        if not tree_item_id:
            raise ChinaBondError(f"债券名称不存在:{bond_name}")
        data = self.query_fxsyl(tree_item_id, date or latest_weekday())
        if not data:
            raise ChinaBondError("收益率数据为空")
        syl = data[0]
        if len(syl) != 2:
            raise ChinaBondError(f"收益率数据异常：{syl}")
        return float(syl[1])

    def query_aaa_company_bond_syl(self) -> float:
        """Return the current AAA company bond yield, or 0.0 when unavailable."""
        try:
            return self.query_current_syl(AAA_COMPANY_BOND)
        except ChinaBondError as exc:
            logger.error("QueryCurrentSyl error:%s", exc)
            return 0.0