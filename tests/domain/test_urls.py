from __future__ import annotations

from postsync.domain.urls import canonical_path, url_variants


def test_url_variants_for_absolute_url_without_trailing_slash() -> None:
    variants = url_variants("https://jobs.example/posts/clerk")

    assert variants == (
        "https://jobs.example/posts/clerk",
        "https://jobs.example/posts/clerk/",
        "/posts/clerk",
        "/posts/clerk/",
    )


def test_url_variants_for_absolute_url_with_trailing_slash() -> None:
    variants = url_variants("https://jobs.example/posts/clerk/")

    assert variants == (
        "https://jobs.example/posts/clerk/",
        "https://jobs.example/posts/clerk",
        "/posts/clerk/",
        "/posts/clerk",
    )


def test_url_variants_are_unique_and_start_with_input() -> None:
    url = "https://jobs.example/"

    variants = url_variants(url)

    assert variants[0] == url
    assert len(variants) == len(set(variants))
    assert "/" in variants


def test_url_variants_for_relative_path_skip_path_forms() -> None:
    assert url_variants("/posts/clerk") == ("/posts/clerk", "/posts/clerk/")


def test_url_variants_never_raise_on_garbage() -> None:
    variants = url_variants("http://[::1")

    assert variants[0] == "http://[::1"
    assert len(variants) == 2


def test_url_variants_of_empty_string_is_empty() -> None:
    assert url_variants("") == ()


def test_canonical_path_forces_slashes() -> None:
    assert canonical_path("https://jobs.example/posts/clerk") == "/posts/clerk/"
    assert canonical_path("posts/clerk") == "/posts/clerk/"
    assert canonical_path("https://jobs.example") == "/"
