"""Shared fixtures: sample service responses and a known song.

Global test safety measures:
 - AIDMATCH__* variables from the developer's shell are removed so config
   tests see the built-in defaults
"""
import os

import pytest

from aidmatch.models import Song


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith('AIDMATCH__') or key == 'AIDMATCH_ENABLE_DOTENV':
            monkeypatch.delenv(key, raising=False)


ACOUSTID_JSON = b"""{
  "status": "ok",
  "results": [
    {
      "id": "res-1",
      "score": 0.92,
      "recordings": [{
        "id": "rec-1",
        "title": "Blue in Green",
        "duration": 245,
        "artists": [
          {"id": "a1", "name": "Miles Davis", "joinphrase": " & "},
          {"id": "a2", "name": "Bill Evans"}
        ],
        "releasegroups": [{
          "id": "rg-1",
          "title": "Kind of Blue",
          "releases": [{
            "id": "rel-1",
            "title": "Kind of Blue",
            "medium_count": 1,
            "date": {"year": 1959, "month": 8},
            "mediums": [{"position": 1, "track_count": 5, "tracks": [{"position": 3}]}]
          }]
        }]
      }]
    },
    {
      "id": "res-2",
      "score": 0.90,
      "recordings": [{
        "id": "rec-2",
        "title": "Blue in Green",
        "duration": 246,
        "artists": [{"id": "a1", "name": "Miles Davis"}],
        "releasegroups": [{
          "id": "rg-2",
          "title": "Kind of Blue",
          "releases": [{
            "id": "rel-2",
            "title": "Kind of Blue",
            "medium_count": 1,
            "date": {"year": 1997},
            "mediums": [{"position": 1, "track_count": 10, "tracks": [{"position": 5}]}]
          }]
        }]
      }]
    }
  ]
}"""

ACOUSTID_XML = b"""<?xml version='1.0' encoding='UTF-8'?>
<response>
  <status>ok</status>
  <results>
    <result>
      <id>res-1</id>
      <score>0.92</score>
      <recordings>
        <recording>
          <id>rec-1</id>
          <title>Blue in Green</title>
          <duration>245</duration>
          <artists>
            <artist><id>a1</id><name>Miles Davis</name><joinphrase> &amp; </joinphrase></artist>
            <artist><id>a2</id><name>Bill Evans</name></artist>
          </artists>
          <releasegroups>
            <releasegroup>
              <id>rg-1</id>
              <title>Kind of Blue</title>
              <releases>
                <release>
                  <id>rel-1</id>
                  <title>Kind of Blue</title>
                  <medium_count>1</medium_count>
                  <date><year>1959</year><month>8</month></date>
                  <mediums>
                    <medium>
                      <position>1</position>
                      <track_count>5</track_count>
                      <tracks><track><position>3</position></track></tracks>
                    </medium>
                  </mediums>
                </release>
              </releases>
            </releasegroup>
          </releasegroups>
        </recording>
      </recordings>
    </result>
    <result>
      <id>res-2</id>
      <score>0.90</score>
      <recordings>
        <recording>
          <id>rec-2</id>
          <title>Blue in Green</title>
          <duration>246</duration>
          <artists>
            <artist><id>a1</id><name>Miles Davis</name></artist>
          </artists>
          <releasegroups>
            <releasegroup>
              <id>rg-2</id>
              <title>Kind of Blue</title>
              <releases>
                <release>
                  <id>rel-2</id>
                  <title>Kind of Blue</title>
                  <medium_count>1</medium_count>
                  <date><year>1997</year></date>
                  <mediums>
                    <medium>
                      <position>1</position>
                      <track_count>10</track_count>
                      <tracks><track><position>5</position></track></tracks>
                    </medium>
                  </mediums>
                </release>
              </releases>
            </releasegroup>
          </releasegroups>
        </recording>
      </recordings>
    </result>
  </results>
</response>
"""

MUSICBRAINZ_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<metadata xmlns="http://musicbrainz.org/ns/mmd-2.0#">
  <recording id="rec-1">
    <title>Blue in Green</title>
    <length>337000</length>
    <artist-credit>
      <name-credit joinphrase=" &amp; ">
        <artist id="a1"><name>Miles Davis</name><sort-name>Davis, Miles</sort-name></artist>
      </name-credit>
      <name-credit>
        <artist id="a2"><name>Bill Evans</name><sort-name>Evans, Bill</sort-name></artist>
      </name-credit>
    </artist-credit>
    <release-list count="2">
      <release id="rel-1">
        <title>Kind of Blue</title>
        <date>1959-08-17</date>
        <artist-credit>
          <name-credit><artist id="a1"><name>Miles Davis</name></artist></name-credit>
        </artist-credit>
        <medium-list count="1">
          <medium>
            <position>1</position>
            <track-list count="5" offset="2">
              <track id="t1"><position>3</position><length>337500</length></track>
            </track-list>
          </medium>
        </medium-list>
      </release>
      <release id="rel-2">
        <title>Kind of Blue (Legacy Edition)</title>
        <date>2009</date>
        <medium-list count="2">
          <medium>
            <position>1</position>
            <track-list count="8" offset="2">
              <track id="t2"><position>3</position></track>
            </track-list>
          </medium>
        </medium-list>
      </release>
    </release-list>
    <relation-list target-type="work">
      <relation type="performance"><target>work-1</target></relation>
    </relation-list>
    <relation-list target-type="artist">
      <relation type="composer">
        <target>a2</target>
        <artist id="a2"><name>Bill Evans</name><sort-name>Evans, Bill</sort-name></artist>
      </relation>
      <relation type="conductor">
        <target>a4</target>
        <artist id="a4"><name>Gil Evans</name><sort-name>Evans, Gil</sort-name></artist>
      </relation>
      <relation type="instrument">
        <target>a5</target>
        <artist id="a5"><name>Paul Chambers</name></artist>
      </relation>
    </relation-list>
  </recording>
</metadata>
"""

ACRCLOUD_JSON = b"""{
  "status": {"msg": "Success", "code": 0, "version": "1.0"},
  "metadata": {
    "timestamp_utc": "2024-05-01 10:00:00",
    "music": [
      {
        "title": "Blue in Green",
        "score": 100,
        "duration_ms": 337000,
        "release_date": "1959-08-17",
        "album": {"name": "Kind of Blue"},
        "artists": [
          {"name": "Miles Davis", "roles": ["MainArtist"]},
          {"name": "Bill Evans", "roles": ["Composer", "AssociatedPerformer"]}
        ]
      },
      {
        "title": "Blue In Green",
        "score": 88,
        "duration_ms": 338000,
        "album": {"name": "Jazz Classics"},
        "artists": [{"name": "Miles Davis"}]
      }
    ]
  }
}"""

ACRCLOUD_NO_RESULT = b"""{"status": {"msg": "No result", "code": 1001, "version": "1.0"}}"""


@pytest.fixture
def acoustid_json() -> bytes:
    return ACOUSTID_JSON


@pytest.fixture
def acoustid_xml() -> bytes:
    return ACOUSTID_XML


@pytest.fixture
def musicbrainz_xml() -> bytes:
    return MUSICBRAINZ_XML


@pytest.fixture
def acrcloud_json() -> bytes:
    return ACRCLOUD_JSON


@pytest.fixture
def acrcloud_no_result() -> bytes:
    return ACRCLOUD_NO_RESULT


@pytest.fixture
def known_song() -> Song:
    """The song the sample responses above describe."""
    return Song(
        title="Blue in Green",
        artist="Miles Davis",
        album="Kind of Blue",
        track_number=3,
        disc_number=1,
        duration=245000,
    )


@pytest.fixture
def payload_files(tmp_path):
    """Sample responses written to disk, keyed by source label."""
    files = {
        'acoustid': tmp_path / 'acoustid.json',
        'acoustid_xml': tmp_path / 'acoustid.xml',
        'musicbrainz': tmp_path / 'recording.xml',
        'acrcloud': tmp_path / 'acr.json',
    }
    files['acoustid'].write_bytes(ACOUSTID_JSON)
    files['acoustid_xml'].write_bytes(ACOUSTID_XML)
    files['musicbrainz'].write_bytes(MUSICBRAINZ_XML)
    files['acrcloud'].write_bytes(ACRCLOUD_JSON)
    return files
