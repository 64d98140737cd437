"""
Collecteur des rapports de suggestion de prix (fichiers xlsx).

Repère le rapport principal le plus récent et les rapports auxiliaires
par durée de location dans le répertoire source, puis lit leur première
feuille avec pandas.
"""

import logging
import os
import re
import zipfile
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from ..config.settings import Settings

logger = logging.getLogger(__name__)


class ReportCollector:
    """
    Accès en lecture aux rapports du répertoire source.
    """
    
    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialise le collecteur.
        
        Args:
            settings: Configuration (si None, charge depuis env)
        """
        self.settings = settings or Settings.from_env()
        self.source_directory = Path(self.settings.source_directory)
        self._report_pattern = re.compile(self.settings.file_pattern)
        self._auxiliary_pattern = re.compile(self.settings.auxiliary_file_pattern)
        
        logger.info(f"Initialized ReportCollector (source: {self.source_directory})")
    
    def ensure_source_directory(self) -> bool:
        """
        Crée le répertoire source s'il n'existe pas.
        
        Returns:
            True si le répertoire existait déjà
        """
        if self.source_directory.is_dir():
            return True
        
        logger.warning(f"Source directory not found, creating it: {self.source_directory}")
        self.source_directory.mkdir(parents=True, exist_ok=True)
        return False
    
    def find_latest_report(self) -> Optional[Path]:
        """
        Rapport principal le plus récemment modifié.
        
        Returns:
            Chemin du fichier, ou None si aucun fichier ne correspond
        """
        if not self.source_directory.is_dir():
            return None
        
        matching = [
            path for path in self.source_directory.iterdir()
            if path.is_file() and self._report_pattern.search(path.name)
        ]
        
        if not matching:
            logger.warning(
                "No matching files found in the source directory "
                "(expected e.g. suggestion_report_90468_2025-04-07.xlsx)"
            )
            return None
        
        latest = max(matching, key=lambda path: os.path.getmtime(path))
        logger.info(f"Found most recent file: {latest.name}")
        return latest
    
    def find_auxiliary_reports(self) -> Dict[int, Path]:
        """
        Rapports auxiliaires <N>D_*.xlsx, indexés par durée de location.
        
        Si plusieurs fichiers portent la même durée, le dernier par ordre
        alphabétique est retenu.
        """
        reports: Dict[int, Path] = {}
        if not self.source_directory.is_dir():
            return reports
        
        for path in sorted(self.source_directory.iterdir()):
            match = self._auxiliary_pattern.match(path.name)
            if path.is_file() and match:
                reports[int(match.group(1))] = path
        
        logger.info(
            f"Found {len(reports)} auxiliary files for reserve length factors: "
            f"{', '.join(path.name for path in reports.values())}"
        )
        return reports
    
    def read_table(self, path: Path) -> pd.DataFrame:
        """
        Lit la première feuille d'un rapport.
        
        Returns:
            DataFrame (vide si le fichier est illisible)
        """
        try:
            if path.suffix.lower() == ".csv":
                return pd.read_csv(path)
            return pd.read_excel(path, sheet_name=0)
        except (OSError, ValueError, zipfile.BadZipFile) as e:
            logger.error(f"Error reading {path.name}: {e}", exc_info=True)
            return pd.DataFrame()
