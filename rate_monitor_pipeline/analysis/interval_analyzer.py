"""
Analyse des intervalles de prix stables.

Enchaîne : séries brutes -> comblement -> lissage -> segmentation.
Aucune erreur de données ne lève d'exception : une entrée vide ou sans
catégorie valide produit une liste d'intervalles vide.
"""

import logging
from typing import Iterable, List, Optional

from ..config.settings import Settings
from ..models.price_interval import IntervalAnalysis, PriceInterval
from ..models.quote import Quote
from .change_point_segmenter import ChangePointSegmenter
from .fluctuation_smoother import FluctuationSmoother
from .gap_filler import GapFiller
from .raw_series_builder import RawSeriesBuilder

logger = logging.getLogger(__name__)


class PriceIntervalAnalyzer:
    """
    Convertit un flux de cotations journalières en intervalles de prix stables.
    """
    
    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialise l'analyseur.
        
        Args:
            settings: Configuration (si None, valeurs par défaut)
        """
        self.settings = settings or Settings()
        self.builder = RawSeriesBuilder()
        self.gap_filler = GapFiller()
        self.smoother = FluctuationSmoother(
            threshold=self.settings.threshold,
            max_passes=self.settings.max_smoothing_passes,
        )
        self.segmenter = ChangePointSegmenter(threshold=self.settings.threshold)
    
    def analyze(
        self,
        quotes: List[Quote],
        selected_categories: Iterable[str]
    ) -> IntervalAnalysis:
        """
        Analyse complète avec métadonnées.
        
        Args:
            quotes: Cotations pré-nettoyées
            selected_categories: Codes Sipp à analyser
            
        Returns:
            IntervalAnalysis (intervalles triés + catégories ignorées/non convergées)
        """
        logger.info("Analyzing price intervals...")
        
        if not quotes:
            logger.warning("No rate data to analyze")
            return IntervalAnalysis()
        
        raw = self.builder.build(quotes, selected_categories)
        matrix = raw.matrix
        analysis = IntervalAnalysis(
            date_axis=list(matrix.dates),
            valid_categories=list(matrix.categories),
            ignored_categories=raw.ignored_categories,
        )
        
        if not matrix.categories:
            logger.warning("No selected category has a positive price, nothing to analyze")
            return analysis
        
        filled = self.gap_filler.fill(matrix)
        smoothing = self.smoother.smooth(filled)
        analysis.unconverged_categories = smoothing.unconverged
        
        logger.info(
            f"Smoothing done: {smoothing.merge_passes} merge passes, "
            f"{smoothing.spike_corrections} one-day corrections"
        )
        
        analysis.intervals = self.segmenter.segment(smoothing.matrix)
        return analysis


def analyze_intervals(
    quotes: List[Quote],
    selected_categories: Iterable[str],
    settings: Optional[Settings] = None
) -> List[PriceInterval]:
    """
    Intervalles de prix stables, triés, couvrant tout l'axe des dates.
    
    Args:
        quotes: Cotations pré-nettoyées
        selected_categories: Codes Sipp à analyser
        settings: Configuration (seuil, cap de lissage)
        
    Returns:
        Liste ordonnée de PriceInterval (vide si aucune donnée exploitable)
    """
    return PriceIntervalAnalyzer(settings).analyze(quotes, selected_categories).intervals
