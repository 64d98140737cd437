"""
Job principal d'analyse d'un rapport de suggestion de prix.

Enchaîne : lecture du rapport le plus récent -> cotations -> intervalles
stables -> export CSV -> tables de pricing et facteurs de durée.
"""

import argparse
import json
import logging
import sys
import time
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from ..analysis.interval_analyzer import PriceIntervalAnalyzer
from ..collectors.report_collector import ReportCollector
from ..config.pricing_config import price_multiplier
from ..config.settings import Settings
from ..exporters.csv_exporter import CsvIntervalExporter
from ..exporters.workbook_exporter import PricingWorkbookExporter
from ..normalizers.quote_normalizer import QuoteNormalizer
from ..pricing.pricing_sheet import PricingSheetBuilder

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def empty_report(reason: str) -> Dict[str, Any]:
    return {
        "status": "empty",
        "reason": reason,
        "intervals": [],
        "interval_prices": [],
        "ignored_categories": [],
        "unconverged_categories": [],
        "exports": {},
    }


def run_analysis(
    settings: Settings,
    categories: Optional[List[str]] = None,
    adjustment_pct: float = 0.0,
    write_exports: bool = True
) -> Dict[str, Any]:
    """
    Exécute l'analyse complète.
    
    Args:
        settings: Configuration
        categories: Codes Sipp à analyser (None = toutes les catégories avec un prix > 0)
        adjustment_pct: Ajustement de prix en % pour les exports
        write_exports: Si False, calcule sans écrire de fichier
        
    Returns:
        Rapport d'exécution
    """
    start_time = time.time()
    collector = ReportCollector(settings)
    normalizer = QuoteNormalizer()
    
    if not collector.ensure_source_directory():
        return empty_report("source directory created, place report files in it and run again")
    
    report_path = collector.find_latest_report()
    if report_path is None:
        return empty_report("no matching report file")
    
    quotes = normalizer.normalize(collector.read_table(report_path))
    if not quotes:
        return empty_report(f"no rate data extracted from {report_path.name}")
    normalizer.summarize(quotes)
    
    available = sorted({quote.category_code for quote in quotes if quote.suggested_amount > 0})
    selected = list(categories) if categories else available
    logger.info(f"Selected {len(selected)} categories: {', '.join(selected)}")
    
    analysis = PriceIntervalAnalyzer(settings).analyze(quotes, selected)
    
    builder = PricingSheetBuilder(settings)
    reference = builder.resolve_reference_category(selected)
    auxiliary_data = {
        length: normalizer.extract_auxiliary_series(collector.read_table(path), reference)
        for length, path in collector.find_auxiliary_reports().items()
    }
    sheet = builder.build(analysis.intervals, selected, adjustment_pct, auxiliary_data)
    
    exports: Dict[str, Optional[str]] = {}
    if write_exports:
        csv_path = CsvIntervalExporter().export(
            analysis.intervals, selected, adjustment_pct, settings.output_directory
        )
        workbook_path = PricingWorkbookExporter().export(sheet, settings.export_directory)
        exports = {
            "csv": str(csv_path) if csv_path else None,
            "workbook": str(workbook_path) if workbook_path else None,
        }
    
    return {
        "status": "success" if analysis.intervals else "empty",
        "source_file": report_path.name,
        "reference_category": sheet.reference_category,
        "multiplier": price_multiplier(adjustment_pct),
        "intervals": [str(interval) for interval in analysis.intervals],
        "interval_prices": [interval.price_lines() for interval in analysis.intervals],
        "ignored_categories": analysis.ignored_categories,
        "unconverged_categories": analysis.unconverged_categories,
        "reserve_factors": len(sheet.reserve_factors),
        "exports": exports,
        "duration_seconds": time.time() - start_time,
    }


def print_report(report: Dict[str, Any], json_output: bool = False) -> None:
    if json_output:
        def json_serial(obj):
            if isinstance(obj, (datetime, date)):
                return obj.isoformat()
            raise TypeError(f"Type {type(obj)} not serializable")
        
        print(json.dumps(report, indent=2, default=json_serial))
        return
    
    print(f"\n{'='*60}")
    print("RATE MONITOR ANALYSIS REPORT")
    print(f"{'='*60}")
    print(f"  Status: {report['status']}")
    if report.get("reason"):
        print(f"  Reason: {report['reason']}")
    if report.get("source_file"):
        print(f"  Source file: {report['source_file']}")
        print(f"  Reference category: {report['reference_category']}")
        print(f"  Multiplier: {report['multiplier']:.2f}")
    
    print(f"\nPrice Intervals ({len(report['intervals'])}):")
    prices = report.get("interval_prices") or [[] for _ in report["intervals"]]
    for i, (interval, lines) in enumerate(zip(report["intervals"], prices), start=1):
        print(f"  {i}. {interval}")
        for line in lines:
            print(f"       {line}")
    
    if report["ignored_categories"]:
        print(f"\nIgnored categories: {', '.join(report['ignored_categories'])}")
    if report["unconverged_categories"]:
        print(f"Smoothing not converged: {', '.join(report['unconverged_categories'])}")
    
    for name, path in report.get("exports", {}).items():
        print(f"  Export {name}: {path or 'not written'}")


def main():
    """Point d'entrée CLI."""
    parser = argparse.ArgumentParser(
        description="Analyze stable price intervals from the latest suggestion report"
    )
    parser.add_argument(
        "--workdir",
        help="Working directory containing source/, output/ and Export/ (default: env or cwd)"
    )
    parser.add_argument(
        "--categories",
        nargs="+",
        help="Sipp codes to analyze (default: all with data)"
    )
    parser.add_argument(
        "--adjustment",
        type=float,
        default=0.0,
        help="Price adjustment in percent (e.g. 15 or -10)"
    )
    parser.add_argument(
        "--reference",
        help="Reference Sipp code (default: ESMS)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute without writing export files"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output report as JSON"
    )
    
    args = parser.parse_args()
    
    settings = Settings.from_env()
    if args.workdir:
        settings.working_directory = args.workdir
    if args.reference:
        settings.reference_category = args.reference
    logging.getLogger().setLevel(settings.log_level)
    
    exit_code = 0
    try:
        report = run_analysis(
            settings=settings,
            categories=args.categories,
            adjustment_pct=args.adjustment,
            write_exports=not args.dry_run,
        )
        print_report(report, json_output=args.json)
        
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        if args.json:
            print(json.dumps({"status": "error", "error": str(e)}))
        else:
            print(f"\nFatal error: {e}")
        exit_code = 1
    
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
