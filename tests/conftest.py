"""Shared fixtures: sample PHIVOLCS pages and a controllable clock."""

import os
import tempfile

# Keep test log files out of the working tree
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="phivolcs_logs_"))

import pytest


LATEST_PAGE_HTML = """
<html>
<body>
<table>
  <tr>
    <th>Date - Time (Philippine Time)</th><th>Latitude (ºN)</th><th>Longitude (ºE)</th>
    <th>Depth (km)</th><th>Mag</th><th>Location</th>
  </tr>
  <tr>
    <td>NOVEMBER 2025</td><td>1.0</td><td>2.0</td><td>3</td><td>4.0</td><td>header row</td>
  </tr>
  <tr>
    <td><a href="2025_Earthquake_Information\\November\\2025_1127_1004_B1.html">27 November 2025 - 10:04 AM</a></td>
    <td>14.20</td>
    <td>121.10</td>
    <td>010</td>
    <td>4.5</td>
    <td>005 km N 45° W of Manila (Metro Manila)</td>
  </tr>
  <tr>
    <td><a href="2025_Earthquake_Information\\November\\2025_1126_2210_B1.html">26 November 2025 - 10:10 PM</a></td>
    <td> 9.85 </td>
    <td>126.40</td>
    <td>025</td>
    <td>2.1</td>
    <td>032 km S 80° E of General Luna (Surigao Del Norte)</td>
  </tr>
  <tr>
    <td>26 November 2025 - 08:00 AM</td>
    <td>10.00</td>
    <td>125.00</td>
    <td>001</td>
    <td>-</td>
    <td>no magnitude reported</td>
  </tr>
  <tr>
    <td></td><td></td><td></td><td></td><td></td><td></td>
  </tr>
  <tr>
    <td>25 November 2025 - 01:15 AM</td>
    <td>5.50</td>
    <td>125.30</td>
    <td>TECTONIC 012</td>
    <td>5.2</td>
    <td>010 km N 12° E of Sarangani (Davao Occidental)</td>
  </tr>
  <tr><td colspan="6">spacer</td></tr>
</table>
</body>
</html>
"""

DETAIL_PAGE_HTML = """
<html>
<body>
<img src="..\\..\\images\\logo.png">
<table>
  <tr><td><b>Earthquake Information No.: 1</b></td></tr>
  <tr>
    <td>Date/Time :</td>
    <td>27 November 2025 - <!-- DateTime-Data --> 10:04 AM</td>
  </tr>
  <tr>
    <td>Location :</td>
    <td><span>14.20°N, 121.10°E</span> - 005 km N 45° W of Manila (Metro Manila)</td>
  </tr>
  <tr>
    <td>Depth of Focus (Km):</td>
    <td>010</td>
  </tr>
  <tr>
    <td>Origin:</td>
    <td>Tectonic</td>
  </tr>
  <tr>
    <td>Magnitude:</td>
    <td>Ms 4.5</td>
  </tr>
  <tr>
    <td>Expecting Damage:</td>
    <td>NO</td>
  </tr>
  <tr>
    <td>Expecting Aftershocks:</td>
    <td>YES</td>
  </tr>
  <tr>
    <td>Issued On:</td>
    <td>27 November 2025 - 10:20 AM</td>
  </tr>
  <tr>
    <td>Prepared by:</td>
    <td>
      JDC / RVB
    </td>
  </tr>
</table>
</body>
</html>
"""


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, now_ms: int = 1_700_000_000_000):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int):
        self.now_ms += ms


@pytest.fixture
def latest_html():
    return LATEST_PAGE_HTML


@pytest.fixture
def detail_html():
    return DETAIL_PAGE_HTML


@pytest.fixture
def clock():
    return FakeClock()
