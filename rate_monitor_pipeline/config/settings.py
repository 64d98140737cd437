"""
Configuration générale du pipeline.
"""

import os
from typing import Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv
from pathlib import Path

# Charger .env depuis la racine du projet
project_root = Path(__file__).parent.parent.parent
load_dotenv(dotenv_path=project_root / ".env")


@dataclass
class Settings:
    """Configuration globale du pipeline."""
    
    # Répertoire de travail (contient source/, output/, Export/)
    working_directory: str = field(default_factory=os.getcwd)
    
    # Rapport principal : suggestion_report_90468_2025-04-07.xlsx
    file_pattern: str = r"suggestion_report_\d+_\d{4}-\d{2}-\d{2}\.xlsx"
    
    # Rapports auxiliaires par durée de location : 1D_xxx.xlsx, 2D_xxx.xlsx...
    auxiliary_file_pattern: str = r"^(\d+)D_.*\.xlsx$"
    
    # Catégorie de référence pour les écarts et les facteurs de durée
    reference_category: str = "ESMS"
    
    # Écart minimal significatif entre deux prix (unité monétaire)
    threshold: float = 1.0
    
    # Nombre maximal de passes de fusion avant de signaler une non-convergence
    max_smoothing_passes: int = 10000
    
    # Durées de location couvertes par la feuille RESERVE LENGTH
    max_rental_length: int = 6
    
    # Nombre de jours du tarif publié (tarif hebdomadaire)
    reference_days: int = 7
    
    # Logging
    log_level: str = "INFO"
    
    @property
    def source_directory(self) -> str:
        return os.path.join(self.working_directory, "source")
    
    @property
    def output_directory(self) -> str:
        return os.path.join(self.working_directory, "output")
    
    @property
    def export_directory(self) -> str:
        return os.path.join(self.working_directory, "Export")
    
    @classmethod
    def from_env(cls) -> "Settings":
        """Crée une instance Settings depuis les variables d'environnement."""
        return cls(
            working_directory=os.getenv("RATE_MONITOR_WORKDIR", os.getcwd()),
            reference_category=os.getenv("REFERENCE_CATEGORY", "ESMS"),
            threshold=float(os.getenv("PRICE_THRESHOLD", "1.0")),
            max_smoothing_passes=int(os.getenv("MAX_SMOOTHING_PASSES", "10000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
