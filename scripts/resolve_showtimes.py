"""
Resolve movie identities for one ingestion cycle.

This script:
1) Loads standardized movies and showtimes from data/
2) Loads the operator noise list (data/noise.txt) when present
3) Clusters duplicate movies and repairs showtime film ids
4) Writes canonical movies, resolved showtimes and orphans to data/resolved/

Usage:
    poetry run python -m scripts.resolve_showtimes

Set LOG_LEVEL=DEBUG to see every clustering and repair decision.
"""

import os  # log level from environment
import sys  # log sink
import time  # measure step timings
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from movie_identity.config import ResolverConfig  # engine settings
from movie_identity.data_loader import DataLoader  # data ingestion
from movie_identity.engine import IdentityResolutionEngine  # clustering + repair


def main():
	logger.remove()
	logger.add(sys.stderr, level=os.getenv('LOG_LEVEL', 'INFO').upper())

	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Resolve Movie Identities")
	logger.info("=" * 60)

	# Resolve project root and key paths
	root = Path(__file__).resolve().parents[1]  # project root
	data_dir = root / 'data'  # input directory
	out_dir = data_dir / 'resolved'  # output directory
	out_dir.mkdir(parents=True, exist_ok=True)  # ensure exists

	# 1) Load data
	logger.info("[1/4] Loading movies and showtimes...")
	loader = DataLoader()
	movies = loader.load_movies_from_jsonl(str(data_dir / 'movies.jsonl'))
	showtimes = loader.load_showtimes_from_jsonl(str(data_dir / 'showtimes.jsonl'))
	logger.info(f"[OK] Loaded {len(movies)} movies and {len(showtimes)} showtimes")

	# 2) Noise list
	logger.info("[2/4] Loading noise list...")
	noise_path = data_dir / 'noise.txt'
	noise = loader.load_noise_list(str(noise_path)) if noise_path.exists() else []
	logger.info(f"[OK] {len(noise)} noise strings")

	# 3) Resolve
	logger.info("[3/4] Clustering and repairing references...")
	t0 = time.time()
	engine = IdentityResolutionEngine(ResolverConfig(
		noise_strings=noise,
		clustering_strategy=os.getenv('CLUSTERING_STRATEGY', 'greedy'),
	))
	result = engine.resolve(movies, showtimes)
	logger.info(f"[OK] Resolved in {time.time() - t0:.2f}s")

	# 4) Write outputs
	logger.info("[4/4] Writing results...")
	loader.write_jsonl(result.movies, str(out_dir / 'movies.jsonl'))
	loader.write_jsonl(result.showtimes, str(out_dir / 'showtimes.jsonl'))
	loader.write_jsonl(result.orphaned, str(out_dir / 'orphans.jsonl'))

	if result.orphaned:
		logger.warning(f"{len(result.orphaned)} showtimes reference unknown films: {result.repair.orphaned_film_ids[:10]}")
	logger.info("=" * 60)


if __name__ == '__main__':
	main()  # invoke resolver
