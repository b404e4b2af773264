"""
TMDB service tests: each call site uses the right endpoint, key and TTL
"""
from datetime import timedelta

from cineshelf.models.content_cache import ContentCache
from cineshelf.schemas.content import DiscoverFilters, MediaType, SortOption, TimeWindow
from cineshelf.services.tmdb_service import TMDBService
from conftest import NOW


def only_entry(db_session):
    db_session.expire_all()
    entries = db_session.query(ContentCache).all()
    assert len(entries) == 1
    return entries[0]


def test_genres_cached_for_thirty_days(tmdb_service, fake_client, db_session):
    fake_client.responses["/genre/movie/list"] = {"genres": [{"id": 28, "name": "Action"}]}

    genres = tmdb_service.get_genres(MediaType.MOVIE)
    tmdb_service.get_genres(MediaType.MOVIE)

    assert genres == [{"id": 28, "name": "Action"}]
    assert len(fake_client.calls) == 1
    entry = only_entry(db_session)
    assert entry.cache_key == "genres_movie"
    assert entry.expires_at == NOW + timedelta(days=30)


def test_now_playing_cached_for_three_hours(tmdb_service, fake_client, db_session, clock):
    tmdb_service.get_now_playing(page=1)

    entry = only_entry(db_session)
    assert entry.cache_key == "now_playing_movie_page1"
    assert entry.expires_at == NOW + timedelta(hours=3)

    clock.advance(timedelta(hours=2, minutes=59))
    tmdb_service.get_now_playing(page=1)
    assert len(fake_client.calls) == 1

    clock.advance(timedelta(minutes=1))
    tmdb_service.get_now_playing(page=1)
    assert len(fake_client.calls) == 2


def test_search_always_calls_upstream(tmdb_service, fake_client, db_session):
    for _ in range(3):
        tmdb_service.search("inception", MediaType.MOVIE)

    assert fake_client.calls == [("/search/movie", {"query": "inception", "page": 1})] * 3
    assert db_session.query(ContentCache).count() == 0


def test_discover_always_calls_upstream(tmdb_service, fake_client, db_session):
    filters = DiscoverFilters(with_genres="28,12", year=2023, sort_by=SortOption.VOTE_AVERAGE_DESC, page=2)

    tmdb_service.discover(MediaType.MOVIE, filters)
    tmdb_service.discover(MediaType.TV, filters)

    assert fake_client.calls == [
        ("/discover/movie", {
            "sort_by": "vote_average.desc",
            "page": 2,
            "with_genres": "28,12",
            "primary_release_year": 2023,
        }),
        ("/discover/tv", {
            "sort_by": "vote_average.desc",
            "page": 2,
            "with_genres": "28,12",
            "first_air_date_year": 2023,
        }),
    ]
    assert db_session.query(ContentCache).count() == 0


def test_trending_windows_are_cached_separately(tmdb_service, fake_client, db_session):
    tmdb_service.get_trending(MediaType.MOVIE, TimeWindow.DAY)
    tmdb_service.get_trending(MediaType.MOVIE, TimeWindow.WEEK)
    tmdb_service.get_trending(MediaType.MOVIE, TimeWindow.DAY)

    assert [call[0] for call in fake_client.calls] == ["/trending/movie/day", "/trending/movie/week"]
    db_session.expire_all()
    keys = sorted(entry.cache_key for entry in db_session.query(ContentCache).all())
    assert keys == ["trending_movie_page1_day", "trending_movie_page1_week"]


def test_pages_are_sent_upstream_and_cached_separately(tmdb_service, fake_client):
    first = tmdb_service.get_popular(MediaType.TV, page=1)
    second = tmdb_service.get_popular(MediaType.TV, page=2)

    assert fake_client.calls == [("/tv/popular", {"page": 1}), ("/tv/popular", {"page": 2})]
    assert first["page"] == 1
    assert second["page"] == 2
    assert tmdb_service.get_popular(MediaType.TV, page=2) == second
    assert len(fake_client.calls) == 2


def test_details_store_subject_identity(tmdb_service, fake_client, db_session):
    fake_client.responses["/movie/550"] = {"id": 550, "title": "Fight Club"}

    movie = tmdb_service.get_movie_details(550)

    assert movie["title"] == "Fight Club"
    entry = only_entry(db_session)
    assert entry.cache_key == "details_movie_550"
    assert entry.tmdb_id == 550
    assert entry.content_type == "movie"
    assert entry.expires_at == NOW + timedelta(days=7)


def test_movie_and_tv_details_with_same_id_do_not_collide(tmdb_service, fake_client):
    fake_client.responses["/movie/1399"] = {"title": "A movie"}
    fake_client.responses["/tv/1399"] = {"name": "Game of Thrones"}

    assert tmdb_service.get_movie_details(1399) == {"title": "A movie"}
    assert tmdb_service.get_tv_details(1399) == {"name": "Game of Thrones"}
    assert len(fake_client.calls) == 2


def test_subject_endpoints(tmdb_service, fake_client, db_session):
    tmdb_service.get_credits(MediaType.TV, 1399)
    tmdb_service.get_videos(MediaType.MOVIE, 550)
    tmdb_service.get_similar(MediaType.MOVIE, 550, page=2)
    tmdb_service.get_recommendations(MediaType.TV, 1399)

    assert fake_client.calls == [
        ("/tv/1399/credits", None),
        ("/movie/550/videos", None),
        ("/movie/550/similar", {"page": 2}),
        ("/tv/1399/recommendations", {"page": 1}),
    ]

    db_session.expire_all()
    expiries = {
        entry.cache_key: entry.expires_at - entry.cached_at
        for entry in db_session.query(ContentCache).all()
    }
    assert expiries == {
        "credits_tv_1399": timedelta(days=7),
        "videos_movie_550": timedelta(days=7),
        "similar_movie_550_page2": timedelta(hours=24),
        "recommendations_tv_1399_page1": timedelta(hours=24),
    }


def test_list_endpoints_use_their_policies(tmdb_service, db_session):
    tmdb_service.get_top_rated(MediaType.MOVIE)
    tmdb_service.get_upcoming()
    tmdb_service.get_trending(MediaType.TV)

    db_session.expire_all()
    expiries = {
        entry.cache_key: entry.expires_at - entry.cached_at
        for entry in db_session.query(ContentCache).all()
    }
    assert expiries == {
        "top_rated_movie_page1": timedelta(hours=12),
        "upcoming_movie_page1": timedelta(hours=12),
        "trending_tv_page1_week": timedelta(hours=6),
    }
