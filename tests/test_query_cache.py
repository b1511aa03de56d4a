import unittest
from unittest import mock

from app.core.query_cache import (
    QueryCache, INVALIDATES, USER_PROJECTS, ANALYTICS, DASHBOARD, PROFILE, PUBLIC_SVGS
)


class QueryCacheTests(unittest.TestCase):
    def setUp(self):
        self.cache = QueryCache(ttl_seconds=30, max_size=10)

    def test_get_or_load_calls_loader_once(self):
        loader = mock.Mock(return_value=["row"])

        self.assertEqual(self.cache.get_or_load((USER_PROJECTS, "u1"), loader), ["row"])
        self.assertEqual(self.cache.get_or_load((USER_PROJECTS, "u1"), loader), ["row"])
        loader.assert_called_once()

    def test_mutation_invalidates_listed_queries_only(self):
        self.cache.set((USER_PROJECTS, "u1", "recent"), [1])
        self.cache.set((ANALYTICS, "u1"), {"views": 1})
        self.cache.set((PROFILE, "u1"), {"display_name": "A"})

        self.cache.apply_mutation("project.create")

        self.assertIsNone(self.cache.get((USER_PROJECTS, "u1", "recent")))
        self.assertIsNone(self.cache.get((ANALYTICS, "u1")))
        self.assertEqual(self.cache.get((PROFILE, "u1")), {"display_name": "A"})

    def test_every_svg_write_invalidates_public_listings(self):
        for mutation in ("svg.create", "svg.update", "svg.favorite", "svg.view", "svg.download"):
            with self.subTest(mutation=mutation):
                self.assertIn(PUBLIC_SVGS, INVALIDATES[mutation])
        self.assertIn(DASHBOARD, INVALIDATES["svg.create"])

    def test_unknown_mutation_is_an_error(self):
        with self.assertRaises(KeyError):
            self.cache.apply_mutation("project.rename")

    def test_entries_expire(self):
        with mock.patch("app.core.query_cache.time.monotonic", return_value=100.0):
            self.cache.set((PROFILE, "u1"), {"a": 1})
        with mock.patch("app.core.query_cache.time.monotonic", return_value=131.0):
            self.assertIsNone(self.cache.get((PROFILE, "u1")))

    def test_full_cache_skips_new_entries(self):
        cache = QueryCache(ttl_seconds=30, max_size=1)
        cache.set((PROFILE, "u1"), 1)
        cache.set((PROFILE, "u2"), 2)

        self.assertEqual(cache.get((PROFILE, "u1")), 1)
        self.assertIsNone(cache.get((PROFILE, "u2")))
