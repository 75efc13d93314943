"""
Fetch a page of movies from TMDB, replay a few swipes, and print the re-ranked batch.

    TMDB_API_KEY=... python scripts/swipe_demo.py --page 1 --top 10
"""

import argparse
import asyncio
import logging

from swipe_core.settings import load_settings
from swipe_logging.logger import configure_logging
from swipe_tmdb.schemas import MovieFilters
from swipe_tmdb.tmdb_client import TMDBClient
from swipe_user.session import PreferenceSession

log = logging.getLogger("swipe_demo")


async def run(page: int, top: int, likes: int, session_id: str) -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    session = PreferenceSession.from_settings(settings, session_id)
    tmdb = TMDBClient.from_settings(settings)
    try:
        popular = await tmdb.get_popular_movies(page)
        # like the first few, dislike the next one
        for movie in popular.results[:likes]:
            session.record_interaction(movie, "like")
        if len(popular.results) > likes:
            session.record_interaction(popular.results[likes], "dislike")

        filters = MovieFilters.from_profile(session.load_profile())
        candidates = await tmdb.discover_movies(filters, page)
    finally:
        await tmdb.aclose()

    titles = {m.id: m.title for m in candidates.results}
    ranked = session.score_batch(candidates.results)
    print(f"{'score':>6}  title")
    for res in ranked[:top]:
        print(f"{res.score:6.3f}  {titles.get(res.item_id)}  [{'; '.join(res.reasons)}]")
    stats = session.statistics()
    log.info(
        "%d interactions (%d likes, %d dislikes), %d favorite genres",
        stats.total,
        stats.likes,
        stats.dislikes,
        stats.favorite_genre_count,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Movie swipe ranking demo")
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--top", type=int, default=10)
    parser.add_argument("--likes", type=int, default=3)
    parser.add_argument("--session-id", default="demo")
    args = parser.parse_args()
    asyncio.run(run(max(args.page, 1), max(args.top, 1), max(args.likes, 0), args.session_id))


if __name__ == "__main__":
    main()
