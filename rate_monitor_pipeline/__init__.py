"""
Pipeline d'analyse des rapports RateMonitor.

Ce package contient :
- l'extraction des cotations journalières par catégorie (Sipp),
- l'analyse des intervalles de prix stables (comblement, lissage, segmentation),
- les calculs de prix dérivés (groupes liés, facteurs de durée de réservation),
- les exports (CSV, feuille de pricing).
"""

__version__ = "1.0.0"
