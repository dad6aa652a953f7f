# Configuration settings for the patent classifier

import os

# Dataset settings
DATASET = "patents"
DATASETS = [DATASET]

# Data layout
DATA_DIR = os.getenv("PATENT_DATA_DIR", "data")
RAW_PATENTS_PATH = os.path.join(DATA_DIR, "raw", DATASET, "patents.tsv")

# Raw file columns
ID_COLUMN = "patent_id"
TEXT_COLUMN = "title"
LABEL_COLUMN = "fintech"

# Label column name used in exported feature tables.
# Stems never contain underscores, so this cannot collide with a term column.
FEATURE_LABEL_COLUMN = "_label"

# Sampling and partitioning
SAMPLE_SIZE = 10000  # None keeps every document
TEST_SIZE = 0.3
RANDOM_SEED = 32984

# Text normalization defaults
NORMALIZER_OPTIONS = {
    "remove_numbers": True,
    "remove_punctuation": True,
    "remove_symbols": True,
    "remove_hyphens": True,
    "lowercase": True,
    "remove_stopwords": True,
    "stem": True,
}

# Decision tree tuning
CV_FOLDS = 10
TUNE_LENGTH = 7
SCORING = "accuracy"

# Service settings
SERVICE_HOST = "0.0.0.0"
SERVICE_PORT = 8012