# page_crawler/report/json_report.py

"""
JSON export of a finished crawl.

Writes the CrawlResult tallies together with the stats time series.
"""
import json
from pathlib import Path

from page_crawler.crawler.models import CrawlResult


def render_json(result: CrawlResult, output_path: Path | str) -> Path:
    """
    Save *result* as JSON at *output_path*.

    :param result: final tallies of a crawl
    :param output_path: path of the JSON file
    :return: Path of the written file

    Example:
    ```python
    from page_crawler.report.json_report import render_json
    report_path = render_json(result, 'reports/crawl.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(result.as_dict(), f, ensure_ascii=False, indent=2)

    return output
