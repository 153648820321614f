"""GPS Match Analyzer - event reconstruction for small-sided games."""
from gps_match_analyzer.services.analysis_pipeline import AnalysisResult, run_analysis
