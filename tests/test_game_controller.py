HEADERS = {"X-Player-Id": "player-1"}


def press(client, key, headers=HEADERS):
    return client.post("/api/game/key", json={"key": key}, headers=headers)


def guess(client, word, headers=HEADERS):
    return client.post("/api/game/guess", json={"guess": word}, headers=headers)


def test_get_game(client):
    response = client.get("/api/game", headers=HEADERS)
    data = response.get_json()

    assert response.status_code == 200
    assert data["success"] is True
    assert data["state"]["day_key"] == "2025-03-10"
    assert data["state"]["game_state"] == "playing"
    assert data["state"]["answer"] is None
    assert data["state"]["max_attempts"] == 6


def test_keys_build_and_submit_a_guess(client):
    for key in "trace":
        assert press(client, key).status_code == 200

    response = press(client, "Enter")
    state = response.get_json()["state"]
    assert state["guesses"] == ["TRACE"]
    assert state["key_statuses"]["C"] == "present"
    assert state["current_guess"] == ""


def test_short_guess_is_a_validation_error(client):
    press(client, "C")
    response = press(client, "ENTER")

    assert response.status_code == 400
    assert response.get_json()["error"] == "Not enough letters"
    assert response.get_json()["state"]["current_guess"] == "C"


def test_ignored_keys_are_not_errors(client):
    response = press(client, "BACKSPACE")
    assert response.status_code == 200

    response = press(client, "F5")
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid key"


def test_missing_key(client):
    response = client.post("/api/game/key", json={}, headers=HEADERS)
    assert response.status_code == 400
    assert response.get_json()["error"] == "Key is required"


def test_win_records_stats_once(client):
    response = guess(client, "crane")
    data = response.get_json()
    assert data["state"]["game_state"] == "won"
    assert data["state"]["answer"] == "CRANE"
    assert data["stats_recorded"] is True

    assert client.get("/api/game", headers=HEADERS).get_json()["stats_recorded"] is False

    stats = client.get("/api/stats", headers=HEADERS).get_json()
    assert stats["stats"] == {"gamesPlayed": 1, "gamesWon": 1, "currentStreak": 1, "maxStreak": 1}
    assert stats["win_percentage"] == 100


def test_duplicate_guess(client):
    guess(client, "SLATE")
    response = guess(client, "SLATE")
    assert response.status_code == 400
    assert response.get_json()["error"] == "Already guessed"


def test_rejected_guess_keeps_typed_letters(client):
    press(client, "C")
    press(client, "R")

    response = guess(client, "AB")
    data = response.get_json()
    assert response.status_code == 400
    assert data["error"] == "Not enough letters"
    assert data["state"]["current_guess"] == "CR"
    assert data["state"]["guesses"] == []


def test_guess_required(client):
    response = client.post("/api/game/guess", json={"guess": 5}, headers=HEADERS)
    assert response.status_code == 400


def test_hint_once(client):
    guess(client, "SLATE")
    response = client.post("/api/game/hint", headers=HEADERS)
    state = response.get_json()["state"]
    assert response.status_code == 200
    assert state["hint_used"] is True
    assert state["hint"] == "Lifts heavy loads on building sites."
    assert state["max_attempts"] == 2

    response = client.post("/api/game/hint", headers=HEADERS)
    assert response.status_code == 400
    assert response.get_json()["error"] == "Hint already used"
    assert response.get_json()["state"]["max_attempts"] == 2


def test_share(client):
    response = client.get("/api/share", headers=HEADERS)
    assert response.status_code == 400

    guess(client, "TRACE")
    guess(client, "CRANE")
    response = client.get("/api/share", headers=HEADERS)
    assert response.status_code == 200
    assert response.get_json()["text"] == "SunSar 2025-03-10 2/6\n\n⬛🟩🟩🟨🟩\n🟩🟩🟩🟩🟩"


def test_players_are_isolated(client):
    guess(client, "SLATE")
    other = client.get("/api/game", headers={"X-Player-Id": "player-2"}).get_json()
    assert other["state"]["guesses"] == []


def test_reset_game(client):
    client.get("/api/game", headers=HEADERS)
    assert client.delete("/api/game", headers=HEADERS).get_json()["success"] is True


def test_countdown(client):
    data = client.get("/api/countdown", headers=HEADERS).get_json()
    assert data["day_key"] == "2025-03-10"
    assert data["display"] == "21:00:00"


def test_health(client):
    data = client.get("/api/health").get_json()
    assert data["status"] == "healthy"
    assert data["day_key"] == "2025-03-10"
    assert data["word_list"]["total_words"] > 0


def test_service_unavailable(client, game_service):
    from sunsar.services.game_service import set_game_service

    set_game_service(None)
    response = client.get("/api/game", headers=HEADERS)
    assert response.status_code == 500
    assert response.get_json()["error"] == "Game service unavailable"
