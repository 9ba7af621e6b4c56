"""Lookup cycle state machine and end-to-end ranking."""
import pytest

from aidmatch.config_types import AppConfig, SourcesConfig
from aidmatch.errors import LookupInProgressError
from aidmatch.match.orchestrator import AudioIdentifier, LookupState
from aidmatch.models import SourceId, Song
from aidmatch.sources import AcoustIdSource, AcrCloudSource, MusicBrainzSource
from aidmatch.tags import AttributeKey as K


class RecordingTransport:
    """Transport stub that remembers its queries."""

    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def __call__(self, query):
        self.calls.append(query)
        return self.payload


def test_round_trip_two_candidates(acoustid_json, known_song):
    identifier = AudioIdentifier(fingerprint=AcoustIdSource(RecordingTransport(acoustid_json)))
    identifier.begin_lookup(known_song)
    assert identifier.run()
    assert list(identifier) == [0, 1]
    first = identifier.get_record(0)
    second = identifier.get_record(1)
    assert first[K.AUDIOID_SCORE] == pytest.approx(92.0)
    assert second[K.AUDIOID_SCORE] == pytest.approx(89.0)

    identifier.start_iteration()
    assert identifier.next() == 0
    assert identifier.next() == 1
    assert identifier.next() is None


def test_one_transition_per_poll(acoustid_json, known_song):
    identifier = AudioIdentifier(fingerprint=AcoustIdSource(RecordingTransport(acoustid_json)))
    assert identifier.poll() is False
    assert identifier.state is LookupState.OFF  # no song yet

    identifier.begin_lookup(known_song)
    seen = []
    done = False
    while not done:
        done = identifier.poll()
        seen.append(identifier.state)
    assert seen == [
        LookupState.START,
        LookupState.WAIT,
        LookupState.WAIT,
        LookupState.WAIT,
        LookupState.PROCESS,
        LookupState.FINISH,
    ]
    # the next poll restarts the cycle
    assert identifier.poll() is False
    assert identifier.state is LookupState.START


def test_begin_lookup_rejected_mid_cycle(known_song):
    identifier = AudioIdentifier()
    identifier.begin_lookup(known_song)
    identifier.poll()
    with pytest.raises(LookupInProgressError):
        identifier.begin_lookup(Song(title="other"))
    assert identifier.run()
    identifier.begin_lookup(Song(title="other"))


def test_recording_lookup_short_circuits(acoustid_json, musicbrainz_xml, acrcloud_json, known_song):
    recognition = RecordingTransport(acrcloud_json)
    identifier = AudioIdentifier(
        fingerprint=AcoustIdSource(RecordingTransport(acoustid_json)),
        recording=MusicBrainzSource(RecordingTransport(musicbrainz_xml)),
        recognition=AcrCloudSource(recognition),
    )
    song = Song(
        title=known_song.title,
        album=known_song.album,
        track_number=3,
        disc_number=1,
        duration=245000,
        recording_id="rec-1",
    )
    identifier.begin_lookup(song)
    assert identifier.run()
    assert recognition.calls == []
    assert list(identifier) == [2, 3, 0, 1]
    assert identifier.get_record(3)[K.AUDIOID_SCORE] == 99.0


def test_recognition_runs_without_recording_id(acrcloud_json, known_song):
    recording = RecordingTransport(b"<metadata/>")
    recognition = RecordingTransport(acrcloud_json)
    identifier = AudioIdentifier(
        recording=MusicBrainzSource(recording),
        recognition=AcrCloudSource(recognition),
    )
    identifier.begin_lookup(known_song)
    assert identifier.run()
    assert recording.calls == []
    assert recognition.calls == [known_song]
    # both ACR candidates are far outside the duration window of the known song
    assert list(identifier) == []


def test_new_cycle_resets_pool(acoustid_json, known_song):
    transport = RecordingTransport(acoustid_json)
    identifier = AudioIdentifier(fingerprint=AcoustIdSource(transport))
    identifier.begin_lookup(known_song)
    identifier.run()
    assert len(identifier.pool) == 2

    transport.payload = b'{"status": "ok", "results": []}'
    identifier.pool.reset()
    identifier.pool.reset()
    identifier.begin_lookup(Song(title="next"))
    identifier.run()
    assert identifier.pool.current_index == 0
    assert len(identifier.pool) == 0
    assert list(identifier) == []


def test_from_config_respects_disabled_sources(acoustid_json, acrcloud_json, known_song):
    cfg = AppConfig(sources=SourcesConfig(acoustid=False))
    fingerprint = RecordingTransport(acoustid_json)
    identifier = AudioIdentifier.from_config(cfg, fingerprint=fingerprint,
                                             recognition=RecordingTransport(acrcloud_json))
    identifier.begin_lookup(known_song)
    identifier.run()
    assert fingerprint.calls == []
    assert identifier.scoring.min_score == 85.0


def test_record_view_is_read_only(acoustid_json, known_song):
    identifier = AudioIdentifier(fingerprint=AcoustIdSource(RecordingTransport(acoustid_json)))
    identifier.begin_lookup(known_song)
    identifier.run()
    with pytest.raises(TypeError):
        identifier.get_record(0)[K.TITLE] = "changed"


class FailingTransport:
    """Transport stub whose network call always fails."""

    def __init__(self):
        self.calls = 0

    def __call__(self, query):
        self.calls += 1
        raise OSError("connection reset")


def _recognised_song():
    return Song(title="Blue in Green", album="Kind of Blue", duration=337000)


def test_transport_failure_does_not_stall_cycle(acrcloud_json, caplog):
    failing = FailingTransport()
    identifier = AudioIdentifier(
        fingerprint=AcoustIdSource(failing),
        recognition=AcrCloudSource(RecordingTransport(acrcloud_json)),
    )
    identifier.begin_lookup(_recognised_song())
    assert identifier.run()
    assert failing.calls == 1
    assert identifier.state is LookupState.FINISH
    assert "transport failed" in caplog.text
    ranked = list(identifier)
    assert 0 in ranked
    for idx in ranked:
        assert identifier.get_record(idx)[K.AUDIOID_IDENT] == SourceId.ACRCLOUD

    # a fresh cycle is accepted after the failure
    identifier.begin_lookup(_recognised_song())
    assert identifier.run()


def test_malformed_fingerprint_payload_keeps_recognition(acrcloud_json):
    identifier = AudioIdentifier(
        fingerprint=AcoustIdSource(RecordingTransport(b'{"results": [')),
        recognition=AcrCloudSource(RecordingTransport(acrcloud_json)),
    )
    identifier.begin_lookup(_recognised_song())
    assert identifier.run()
    assert len(identifier.pool) == 2
    ranked = list(identifier)
    assert 0 in ranked
    assert identifier.get_record(0)[K.TITLE] == "Blue in Green"
