"""
settings.py

Constants shared across huffcodec.
"""


VERSION = 1

# Written at the head of every compressed file.
FILE_SIGNATURE = b'HUF'
FILE_EXTENSION = '.huf'

TREE_TAG_BRANCH = 0x00
TREE_TAG_LEAF = 0x01

CODING_STEP_INTERVAL = 10000
