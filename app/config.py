import os
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]

DEFAULT_INPUT_PATH = os.getenv("WAVSPLIT_INPUT", "audiofile.wav")
DEFAULT_CHUNK_MINUTES = float(os.getenv("WAVSPLIT_CHUNK_MINUTES", "10"))
DEFAULT_PREFIX = os.getenv("WAVSPLIT_PREFIX", "audiofile_part")
DEFAULT_OUTPUT_DIR = os.getenv("WAVSPLIT_OUTPUT_DIR", "audio_chunks")
DEFAULT_PACKET_FRAMES = int(os.getenv("WAVSPLIT_PACKET_FRAMES", "1152"))
