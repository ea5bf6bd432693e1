"""
External data sources
"""
from sharesathi.data_sources.yahoo_finance import yahoo_finance
from sharesathi.data_sources.nse_bse import nse_bse
from sharesathi.data_sources.groq import groq
from sharesathi.data_sources.grokipedia import grokipedia
from sharesathi.data_sources.zenquotes import zenquotes
from sharesathi.data_sources.forex import forex

__all__ = [
    "yahoo_finance",
    "nse_bse",
    "groq",
    "grokipedia",
    "zenquotes",
    "forex",
]
