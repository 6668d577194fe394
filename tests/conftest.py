from pathlib import Path
from typing import Dict, List, Union

import pytest
import requests

from apod_archive_dataset.pipeline.config import PacingConfig, ScrapingConfig

BASE_URL = "https://apod.nasa.gov/apod/"


class FakeResponse:
    def __init__(self, url: str, status_code: int = 200, text: str = ""):
        self.url = url
        self.status_code = status_code
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} for {self.url}", response=self)


class FakeSession:
    """
    url -> html, status code, exception, or a list of those consumed per call.
    Unknown urls answer 404.
    """

    def __init__(self, pages: Dict[str, Union[str, int, Exception, List]]):
        self.pages = dict(pages)
        self.calls: List[str] = []

    def get(self, url: str, timeout=None) -> FakeResponse:
        self.calls.append(url)
        answer = self.pages.get(url, 404)
        if isinstance(answer, list):
            answer = answer.pop(0) if len(answer) > 1 else answer[0]
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, int):
            return FakeResponse(url, status_code=answer)
        return FakeResponse(url, text=answer)


@pytest.fixture
def cfg(tmp_path: Path) -> ScrapingConfig:
    return ScrapingConfig(
        base_url=BASE_URL,
        data_file=tmp_path / "data" / "data.json",
        partial_file=tmp_path / "data" / "data_partial.json",
        backup_file=tmp_path / "data" / "data.json.bak",
        stats_dir=tmp_path / "stats",
        checkpoint_every=2,
        build=PacingConfig(delay=0, timeout=1),
        enrich=PacingConfig(delay=0, timeout=1, retries=3, backoff=0),
    )


@pytest.fixture
def sleeps(monkeypatch) -> List[float]:
    recorded: List[float] = []
    monkeypatch.setattr("time.sleep", lambda seconds: recorded.append(seconds))
    return recorded


def apod_page(title: str = "A Star", explanation: str = "Stars shine.", media: str = "") -> str:
    # tidy markup: every <p> closed, label and body in separate blocks
    return (
        "<html><body>"
        "<center><h1>Astronomy Picture of the Day</h1>"
        f"{media}"
        "</center>"
        f"<center><b> {title} </b><br>Image Credit &amp; Copyright: Jane Doe<br></center>"
        "<center><b> Explanation: </b></center>"
        f"<p>{explanation}</p>"
        "</body></html>"
    )


# Archive pages as served: <p> tags are never closed and the explanation
# paragraph runs straight into the "Tomorrow's picture" block.
ARCHIVE_PAGE = """<html>
<head>
<title> APOD: 2025 October 24 - Galaxy Wars</title>
</head>
<body BGCOLOR="#F4F4FF" text="#000000" lang="EN">

<center>
<h1> Astronomy Picture of the Day </h1>
<p>

<a href="archivepix.html">Discover the cosmos!</a>
Each day a different image or photograph of our fascinating universe is
featured, along with a brief explanation written by a professional astronomer.
<p>

2025 October 24
<br>
<a href="image/2510/GalaxyWars.jpg">
<IMG SRC="image/2510/GalaxyWars_1024.jpg"
alt="See Explanation.  Clicking on the picture will download
the highest resolution version available." style="max-width:100%"></a>
</center>

<center>
<b> Galaxy Wars </b> <br>
<b> Image Credit: </b> Copyright: Jane Doe (Sky Lab)
</center> <p>

<b> Explanation: </b>
What's happening to this
galaxy?  Two galaxies are   colliding.
<p> <center>
<b> Tomorrow's picture: </b>dark sky

<p> <hr>
<a href="archivepix.html">Archive</a>
| <a href="lib/apsubmit2015.html">Submissions</a>
<p> <hr>
<p> Authors &amp; editors: Robert Nemiroff
</center>
</body>
</html>
"""

# Early archive layout: the label sits alone in its own paragraph.
EARLY_ARCHIVE_PAGE = """<html>
<head><title>APOD: June 16, 1995</title></head>
<body>
<center><h1>Astronomy Picture of the Day</h1>
<a href="image/neutron.gif"><img src="image/neutron.gif"></a>
</center>
<center><b> Neutron Star Earth </b><br>
Picture Credit: Dr. Wick
</center>
<p>
<b> Explanation: </b>
<p>
What if Earth were
compressed to the size of a neutron star?
<p>
<center>
<b> Tomorrow's picture: </b> Jupiter
</center>
</body>
</html>
"""
