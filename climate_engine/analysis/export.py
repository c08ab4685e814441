"""CSV export of per-variable yearly results and the matching reader."""
import csv
import io
import json
import logging
from collections.abc import Mapping

from climate_engine.analysis.parser import iter_records, parse_value
from climate_engine.models.analysis import VariableAnalysis
from climate_engine.models.series import YearlyMap

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["variable", "year", "value", "mean", "median", "std", "probabilities"]


def format_number(value: float | None) -> str:
    """30.0 -> "30", 30.25 -> "30.25", None -> ""."""
    if value is None:
        return ""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def build_csv_export(results: Mapping[str, VariableAnalysis]) -> str:
    """One row per (variable, year) with the variable's summary stats repeated."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)

    for variable, analysis in results.items():
        stats = analysis.stats
        probs = json.dumps(analysis.probabilities)
        for year, value in analysis.years.items():
            writer.writerow([
                variable,
                year,
                format_number(value),
                format_number(stats.mean),
                format_number(stats.median),
                format_number(stats.std),
                probs,
            ])

    return buf.getvalue()


def read_csv_export(text: str) -> dict[str, YearlyMap]:
    """Recover {variable: {year: value}} from build_csv_export output."""
    out: dict[str, YearlyMap] = {}
    for fields in iter_records(text, header_tokens=("variable",)):
        if len(fields) < 3:
            continue
        try:
            year = int(fields[1])
        except ValueError:
            logger.debug("Skipping export row with bad year: %r", fields[1])
            continue
        value = parse_value(fields[2])
        if value is None:
            continue
        out.setdefault(fields[0], {})[year] = value
    return out
