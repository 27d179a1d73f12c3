"""
CSV export module.
Writes the currently filtered/sorted episodes using the same display values as the table.
"""

import csv
import io
from pathlib import Path
from typing import Sequence

from loguru import logger

from .config import CSV_FILENAME
from .formatting import COLUMNS, display_row
from .models import Episode


def export_csv(episodes: Sequence[Episode]) -> str:
	"""
	Return CSV text: header row plus one row per episode.
	Values containing a comma, a quote, CR or LF are quoted, with quotes doubled.
	"""
	buffer = io.StringIO()
	writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator='\r\n')  # RFC 4180 rows; a CR or LF inside a value is quoted
	writer.writerow(COLUMNS)
	for episode in episodes:
		writer.writerow(display_row(episode))
	logger.debug(f"[Export] Built CSV with {len(episodes)} row(s)")
	return buffer.getvalue()


def write_csv(episodes: Sequence[Episode], path: str = CSV_FILENAME) -> Path:
	"""Write the CSV text to disk and return the path written."""
	path = Path(path)
	path.parent.mkdir(parents=True, exist_ok=True)
	with open(path, 'w', encoding='utf-8', newline='') as f:
		f.write(export_csv(episodes))
	logger.info(f"[Export] Wrote {len(episodes)} episodes to {path}")
	return path
