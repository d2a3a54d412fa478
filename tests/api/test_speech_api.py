def test_short_text_is_one_request(client, synth):
    resp = client.post("/api/tts", json={"text": "Hello there.", "voice_id": "v1"})

    assert resp.status_code == 200
    assert resp.content == b"ID3-1"
    assert resp.headers["content-type"] == "audio/mpeg"
    assert resp.headers["cache-control"] == "no-store"
    assert resp.headers["x-voice-id"] == "v1"
    assert resp.headers["x-model-id"] == "default-model"
    assert synth.texts == ["Hello there."]


def test_long_text_is_narrated_in_pieces(client, synth):
    first = "First paragraph " + "a" * 60
    second = "Second paragraph " + "b" * 60
    resp = client.post("/api/tts", json={"text": f"{first}\n\n{second}"})

    assert resp.status_code == 200
    assert resp.content == b"ID3-1ID3-2"
    assert synth.texts == [first, second]


def test_blank_long_text_is_rejected(client, synth):
    resp = client.post("/api/tts", json={"text": " " * 150})

    assert resp.status_code == 400
    assert synth.texts == []


def test_long_text_keeps_requested_output_format(client, synth):
    text = "First paragraph " + "a" * 60 + "\n\n" + "Second paragraph " + "b" * 60

    resp = client.post("/api/tts", json={"text": text, "output_format": "pcm_16000"})

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "audio/pcm"
    assert len(synth.texts) == 2


def test_long_text_rejects_container_formats(client, synth):
    text = "First paragraph " + "a" * 60 + "\n\n" + "Second paragraph " + "b" * 60

    resp = client.post("/api/tts", json={"text": text, "output_format": "opus_48000_64"})

    assert resp.status_code == 400
    assert synth.texts == []


def test_short_text_media_type_follows_format(client, synth):
    resp = client.post("/api/tts", json={"text": "Hi.", "output_format": "ulaw_8000"})

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "audio/basic"
