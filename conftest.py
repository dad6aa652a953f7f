"""
Shared pytest fixtures
"""

import random

import pytest

from preprocessing.text_normalizer import TextNormalizer

# Small fixed stop-word list so tests never download the NLTK corpus
STOP_WORDS = {"a", "an", "and", "for", "in", "of", "on", "the", "to", "with", "using", "via"}

FINTECH_FILLERS = ["wallet", "ledger", "credit", "bank", "account", "loan", "transfer", "card"]
OTHER_FILLERS = ["rotor", "valve", "piston", "turbine", "gear", "nozzle", "blade", "axle"]


@pytest.fixture
def normalizer() -> TextNormalizer:
    return TextNormalizer(stop_words=STOP_WORDS)


@pytest.fixture
def paper_counts():
    """Three training documents: financ=[1,0,2], insur=[0,1,0]"""
    return [["financ"], ["insur"], ["financ", "financ"]]


def make_titles(n_per_class: int = 20, seed: int = 7):
    """
    Separable toy patent titles: every fintech title contains "payment",
    every other title contains "engine". Each title normalizes to three stems.
    """
    rng = random.Random(seed)
    rows = []
    for i in range(n_per_class):
        a, b = rng.sample(FINTECH_FILLERS, 2)
        rows.append((f"US{1000 + i}", f"Payment {a} for the {b}", 1))
    for i in range(n_per_class):
        a, b = rng.sample(OTHER_FILLERS, 2)
        rows.append((f"US{2000 + i}", f"Engine {a} with a {b}", 0))
    return rows


@pytest.fixture
def titles():
    return make_titles()
