"""End-to-end tests for specbook.generator.build_bundle."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from specbook.exceptions import (
    DuplicateTagError,
    SchemaInvalidError,
    SpecSyntaxError,
    UnknownTagReferenceError,
)
from specbook.generator import build_bundle, read_bundle


def _swagger_block(path: str, method: str) -> str:
    return (
        f'{{% swagger src="./.gitbook/openapi.yaml" path="{path}" method="{method}" %}}\n'
        "[openapi.yaml](<./.gitbook/openapi.yaml>)\n"
        "{% endswagger %}\n"
    )


class TestPetStoreJson:
    """One tagged and one untagged operation, supplied as JSON."""

    def test_archive_layout(self, petstore_json_bytes: bytes) -> None:
        bundle = build_bundle(petstore_json_bytes)
        files = read_bundle(bundle.archive)
        assert set(files) == {
            "SUMMARY.md",
            "README.md",
            "pets.md",
            "__internal-untagged.md",
            ".gitbook/openapi.yaml",
        }

    def test_file_contents(self, petstore_json_bytes: bytes) -> None:
        files = read_bundle(build_bundle(petstore_json_bytes).archive)
        assert files["README.md"] == b"# Pet Store"
        assert files["SUMMARY.md"].decode() == (
            "# Table of contents\n\n"
            "[pets.md](pets.md)\n"
            "[__internal-untagged.md](__internal-untagged.md)\n"
        )
        assert files["pets.md"].decode() == "# pets\n\n" + _swagger_block("/pets", "get")
        assert files["__internal-untagged.md"].decode() == (
            "# __internal-untagged\n\n" + _swagger_block("/owners", "post")
        )

    def test_json_embedded_verbatim(self, petstore_json_bytes: bytes) -> None:
        files = read_bundle(build_bundle(petstore_json_bytes).archive)
        assert files[".gitbook/openapi.yaml"] == petstore_json_bytes

    def test_bundle_keeps_intermediates(self, petstore_json_bytes: bytes) -> None:
        bundle = build_bundle(petstore_json_bytes)
        assert bundle.document.info.title == "Pet Store"
        assert list(bundle.groups) == ["pets", "__internal-untagged"]
        assert [p.path for p in bundle.pages] == ["pets.md", "__internal-untagged.md"]

    def test_repeatable(self, petstore_json_bytes: bytes) -> None:
        assert build_bundle(petstore_json_bytes).archive == build_bundle(
            petstore_json_bytes
        ).archive


class TestPetStoreYaml:
    def test_multi_tag_and_unused_tags(self, petstore_yaml_bytes: bytes) -> None:
        files = read_bundle(build_bundle(petstore_yaml_bytes).archive)
        assert "unused.md" not in files
        pets = files["pets.md"].decode()
        store = files["store.md"].decode()
        assert pets.startswith(
            "# pets\n\nEverything about your pets\n\n"
            "[Find out more](https://example.com/pets)\n\n"
        )
        assert _swagger_block("/pets", "post") in pets
        assert _swagger_block("/pets", "post") in store
        assert _swagger_block("/store/orders", "get") in store
        assert files["__internal-untagged.md"].decode().count("{% swagger ") == 1

    def test_yaml_embedded_verbatim(self, petstore_yaml_bytes: bytes) -> None:
        files = read_bundle(build_bundle(petstore_yaml_bytes).archive)
        assert files[".gitbook/openapi.yaml"] == petstore_yaml_bytes

    def test_summary_matches_pages(self, petstore_yaml_bytes: bytes) -> None:
        files = read_bundle(build_bundle(petstore_yaml_bytes).archive)
        summary_lines = files["SUMMARY.md"].decode().splitlines()[2:]
        page_names = [
            name for name in files if name not in {"SUMMARY.md", "README.md"}
            and not name.startswith(".gitbook/")
        ]
        assert summary_lines == [f"[{name}]({name})" for name in page_names]


class TestEdgeCases:
    def _spec(self, **overrides: object) -> bytes:
        spec: dict[str, object] = {
            "openapi": "3.1.0",
            "info": {"title": "Edge", "version": "1"},
            "paths": {},
        }
        spec.update(overrides)
        return json.dumps(spec).encode("utf-8")

    def test_no_paths_gives_empty_summary(self) -> None:
        files = read_bundle(build_bundle(self._spec()).archive)
        assert set(files) == {"SUMMARY.md", "README.md", ".gitbook/openapi.yaml"}
        assert files["SUMMARY.md"] == b"# Table of contents\n\n\n"

    def test_unknown_tag_aborts(self) -> None:
        raw = self._spec(paths={"/a": {"get": {"tags": ["ghost"]}}})
        with pytest.raises(UnknownTagReferenceError):
            build_bundle(raw)

    def test_unknown_tag_placeholder(self) -> None:
        raw = self._spec(paths={"/a": {"get": {"tags": ["ghost"]}}})
        files = read_bundle(build_bundle(raw, unknown_tags="placeholder").archive)
        assert files["ghost.md"].decode() == "# ghost\n\n" + _swagger_block("/a", "get")

    def test_duplicate_tags_abort(self) -> None:
        raw = self._spec(tags=[{"name": "a"}, {"name": "a"}])
        with pytest.raises(DuplicateTagError):
            build_bundle(raw)

    def test_invalid_schema_aborts(self) -> None:
        with pytest.raises(SchemaInvalidError):
            build_bundle(self._spec(info={"version": "1"}))

    def test_syntax_error_aborts(self) -> None:
        with pytest.raises(SpecSyntaxError):
            build_bundle(b"{ not: [valid")

    def test_split_spec(self, split_spec_path: Path) -> None:
        bundle = build_bundle(split_spec_path.read_bytes(), base_uri=str(split_spec_path))
        files = read_bundle(bundle.archive)
        assert "pets.md" in files
        assert files[".gitbook/openapi.yaml"] == split_spec_path.read_bytes()


class TestPageCollisions:
    """Tag names that escape to the same file must all keep their endpoints."""

    def _build(self, paths: dict, tags: list) -> dict[str, bytes]:
        raw = json.dumps(
            {
                "openapi": "3.0.3",
                "info": {"title": "Collide", "version": "1"},
                "tags": tags,
                "paths": paths,
            }
        )
        return read_bundle(build_bundle(raw).archive)

    def test_escaped_names_do_not_overwrite(self) -> None:
        files = self._build(
            {"/x": {"get": {"tags": ["a/b"]}}, "/y": {"get": {"tags": ["a:b"]}}},
            [{"name": "a/b"}, {"name": "a:b"}],
        )
        assert files["a-b.md"].decode() == "# a/b\n\n" + _swagger_block("/x", "get")
        assert files["a-b-2.md"].decode() == "# a:b\n\n" + _swagger_block("/y", "get")
        assert files["SUMMARY.md"].decode() == (
            "# Table of contents\n\n[a-b.md](a-b.md)\n[a-b-2.md](a-b-2.md)\n"
        )

    def test_untagged_page_not_replaced(self) -> None:
        files = self._build(
            {
                "/x": {"get": {}},
                "/y": {"get": {"tags": ["__internal:untagged"]}},
            },
            [{"name": "__internal:untagged"}],
        )
        untagged = files["__internal-untagged.md"].decode()
        declared = files["__internal-untagged-2.md"].decode()
        assert untagged == "# __internal-untagged\n\n" + _swagger_block("/x", "get")
        assert declared == "# __internal:untagged\n\n" + _swagger_block("/y", "get")

    def test_every_endpoint_on_some_page(self) -> None:
        files = self._build(
            {
                "/a": {"get": {"tags": ["x/y"]}},
                "/b": {"get": {"tags": ["x:y"]}},
                "/c": {"get": {"tags": ["x*y"]}},
            },
            [{"name": "x/y"}, {"name": "x:y"}, {"name": "x*y"}],
        )
        pages = "".join(
            data.decode() for name, data in files.items() if name.endswith(".md")
        )
        for path in ("/a", "/b", "/c"):
            assert f'path="{path}"' in pages


class TestUntaggedSuppression:
    def test_all_tagged_gives_no_untagged_page(self) -> None:
        raw = json.dumps(
            {
                "openapi": "3.0.3",
                "info": {"title": "Tagged", "version": "1"},
                "tags": [{"name": "pets"}, {"name": "store"}],
                "paths": {
                    "/pets": {"get": {"tags": ["pets"]}, "post": {"tags": ["pets", "store"]}},
                    "/orders": {"get": {"tags": ["store"]}},
                },
            }
        )
        files = read_bundle(build_bundle(raw).archive)
        assert "__internal-untagged.md" not in files
        assert "__internal-untagged" not in files["SUMMARY.md"].decode()
        assert set(files) == {
            "SUMMARY.md",
            "README.md",
            "pets.md",
            "store.md",
            ".gitbook/openapi.yaml",
        }
