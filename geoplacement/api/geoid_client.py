"""Geoid undulation lookup.

Unlike elevation, a missing undulation is not fatal: every failure mode
(no `geoidHeight` field, non-200, transport error, undecodable body) is
reported as ``None`` and the caller decides how to degrade.
"""
from __future__ import annotations

import logging
import math
import os
from typing import Optional

import requests

from .. import constants

log = logging.getLogger(__name__)


class GeoidClient:
    def __init__(
        self,
        url: Optional[str] = None,
        timeout: float = constants.HTTP_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or os.getenv("GEOID_SERVER_URL") or constants.GEOID_SERVER_URL
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": constants.USER_AGENT})
        self.session = session

    def get_undulation(self, lat: float, lng: float) -> Optional[float]:
        """Geoid height above the ellipsoid at (*lat*, *lng*), or None when unknown."""
        decimals = constants.QUERY_COORD_DECIMALS
        params = {"lat": f"{lat:.{decimals}f}", "lng": f"{lng:.{decimals}f}"}
        try:
            resp = self.session.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            log.warning("Geoid request failed for (%s, %s): %s", params["lat"], params["lng"], exc)
            return None

        log.debug("Geoid service answered %s", resp.status_code)
        if resp.status_code != 200:
            log.warning("Geoid service answered HTTP %s for (%s, %s)", resp.status_code, params["lat"], params["lng"])
            return None

        try:
            payload = resp.json()
        except ValueError:
            log.warning("Geoid service returned a non-JSON body")
            return None

        value = payload.get("geoidHeight") if isinstance(payload, dict) else None
        if value is None:
            return None
        try:
            result = float(value)
        except (TypeError, ValueError):
            result = None
        if result is None or not math.isfinite(result):
            log.warning("Unexpected geoidHeight value %r", value)
            return None
        return result
