"""Error review queries and remedial round generation."""
import random

import pytest

from wordmem_app import db
from wordmem_app.models import ErrorTrainingRound, Wordbook
from wordmem_app.modules.errors.logics.round_selection import select_round_words, total_errors_by_word


@pytest.fixture
def finished_session(client, auth_headers, wordbook_factory):
    headers = auth_headers()
    _, word_ids = wordbook_factory(name='System', kind=Wordbook.KIND_SYSTEM,
                                   words=['apple', 'banana', 'cherry', 'damson'])
    created = client.post('/api/training/sessions', json={'sessionName': 'S', 'wordIds': word_ids},
                          headers=headers)
    session_id = created.get_json()['data']['id']
    results = [
        {'wordId': word_ids[0], 'isCorrect': True},
        {'wordId': word_ids[1], 'isCorrect': False, 'userInput': 'banan'},
        {'wordId': word_ids[1], 'isCorrect': False, 'errorType': 'pronunciation'},
        {'wordId': word_ids[2], 'isCorrect': False},
        {'wordId': word_ids[3], 'isCorrect': True},
    ]
    response = client.post(f'/api/training/sessions/{session_id}/results', json={'results': results},
                           headers=headers)
    assert response.status_code == 200, response.get_json()
    return headers, session_id, word_ids


class TestRoundSelection:

    def test_most_missed_words_first(self):
        picked = select_round_words({1: 1, 2: 5, 3: 3}, 2, rng=random.Random(0))
        assert picked == [2, 3]

    def test_never_pads(self):
        assert sorted(select_round_words({7: 2, 8: 1}, 3)) == [7, 8]

    def test_ties_are_shuffled_by_rng(self):
        totals = {word_id: 1 for word_id in range(20)}
        first = select_round_words(totals, 20, rng=random.Random(1))
        second = select_round_words(totals, 20, rng=random.Random(2))
        assert sorted(first) == sorted(second) == list(range(20))
        assert first != second

    def test_totals_sum_counters_per_word(self):
        assert total_errors_by_word([(1, 2), (1, 1), (2, 4)]) == {1: 3, 2: 4}


def test_list_errors_with_filters(client, finished_session):
    headers, session_id, word_ids = finished_session

    everything = client.get('/api/errors', headers=headers).get_json()['data']
    spelling = client.get('/api/errors?errorType=spelling', headers=headers).get_json()['data']
    for_word = client.get(f'/api/errors?wordId={word_ids[2]}&limit=1', headers=headers).get_json()['data']

    assert len(everything) == 3
    assert {row['session_name'] for row in everything} == {'S'}
    assert len(spelling) == 2
    assert [row['word'] for row in for_word] == ['cherry']


def test_error_stats_per_type(client, finished_session):
    headers, session_id, _ = finished_session

    stats = client.get(f'/api/errors/stats?sessionId={session_id}', headers=headers).get_json()['data']

    assert stats == [
        {'error_type': 'spelling', 'error_count': 2, 'unique_words': 2, 'sessions_affected': 1},
        {'error_type': 'pronunciation', 'error_count': 1, 'unique_words': 1, 'sessions_affected': 1},
    ]


def test_top_errors_ranks_by_occurrences(client, finished_session):
    headers, _, word_ids = finished_session

    rows = client.get('/api/errors/top-errors?limit=5', headers=headers).get_json()['data']

    assert rows[0]['word_id'] == word_ids[1]
    assert rows[0]['error_count'] == 2
    assert rows[0]['error_types'] == ['pronunciation', 'spelling']
    assert rows[1]['word'] == 'cherry'


def test_bad_query_numbers_are_rejected(client, finished_session):
    headers, _, _ = finished_session

    assert client.get('/api/errors?limit=0', headers=headers).status_code == 400
    assert client.get('/api/errors/stats?days=abc', headers=headers).status_code == 400


def test_generate_round_caps_at_available_words(app, client, finished_session):
    headers, session_id, word_ids = finished_session

    response = client.post('/api/errors/generate-random-round',
                           json={'sessionId': session_id, 'wordCount': 3}, headers=headers)

    assert response.status_code == 201, response.get_json()
    data = response.get_json()['data']
    assert data['word_ids'] == [word_ids[1], word_ids[2]]
    assert data['round_number'] == 1
    assert data['status'] == 'active'
    assert [word['word'] for word in data['words']] == ['banana', 'cherry']
    with app.app_context():
        stored = db.session.get(ErrorTrainingRound, data['id'])
        assert stored.word_ids == [word_ids[1], word_ids[2]]


def test_generate_round_without_errors_is_not_found(client, auth_headers, wordbook_factory):
    headers = auth_headers()
    _, word_ids = wordbook_factory(name='System', kind=Wordbook.KIND_SYSTEM, words=['solo'])
    created = client.post('/api/training/sessions', json={'sessionName': 'Clean', 'wordIds': word_ids},
                          headers=headers)

    response = client.post('/api/errors/generate-random-round',
                           json={'sessionId': created.get_json()['data']['id']}, headers=headers)

    assert response.status_code == 404


@pytest.mark.parametrize('word_count', [0, -2, 'ten', 2.5])
def test_generate_round_rejects_bad_word_count(client, finished_session, word_count):
    headers, session_id, _ = finished_session

    response = client.post('/api/errors/generate-random-round',
                           json={'sessionId': session_id, 'wordCount': word_count}, headers=headers)

    assert response.status_code == 400


def test_manual_round_and_status_lifecycle(client, finished_session):
    headers, session_id, word_ids = finished_session

    created = client.post('/api/errors/training-rounds', json={
        'sessionId': session_id, 'wordIds': [word_ids[2], word_ids[1]], 'roundNumber': 2,
    }, headers=headers)
    round_id = created.get_json()['data']['id']

    active = client.get(f'/api/errors/training-rounds?sessionId={session_id}', headers=headers)
    completed = client.put(f'/api/errors/training-rounds/{round_id}/status', json={'status': 'completed'},
                           headers=headers)
    reopened = client.put(f'/api/errors/training-rounds/{round_id}/status', json={'status': 'active'},
                          headers=headers)
    still_active = client.get('/api/errors/training-rounds', headers=headers).get_json()['data']
    every_round = client.get('/api/errors/training-rounds?status=all', headers=headers).get_json()['data']

    assert created.status_code == 201
    assert created.get_json()['data']['word_ids'] == [word_ids[2], word_ids[1]]
    assert [row['id'] for row in active.get_json()['data']] == [round_id]
    assert completed.get_json()['data']['completed_at'] is not None
    assert reopened.status_code == 409
    assert still_active == []
    assert [row['round_number'] for row in every_round] == [2]


def test_manual_round_rejects_foreign_words(client, finished_session, wordbook_factory):
    headers, session_id, _ = finished_session
    _, other_ids = wordbook_factory(name='Other', kind=Wordbook.KIND_SYSTEM, words=['zebra'])

    response = client.post('/api/errors/training-rounds',
                           json={'sessionId': session_id, 'wordIds': other_ids}, headers=headers)

    assert response.status_code == 400


def test_delete_error_record(client, auth_headers, finished_session):
    headers, _, _ = finished_session
    error_id = client.get('/api/errors', headers=headers).get_json()['data'][0]['id']

    assert client.delete(f'/api/errors/{error_id}', headers=auth_headers('bob')).status_code == 404
    assert client.delete(f'/api/errors/{error_id}', headers=headers).status_code == 200
    assert len(client.get('/api/errors', headers=headers).get_json()['data']) == 2


def test_rounds_and_errors_are_private(client, auth_headers, finished_session):
    headers, session_id, word_ids = finished_session
    bob = auth_headers('bob')
    round_id = client.post('/api/errors/generate-random-round', json={'sessionId': session_id},
                           headers=headers).get_json()['data']['id']

    generated = client.post('/api/errors/generate-random-round', json={'sessionId': session_id}, headers=bob)
    manual = client.post('/api/errors/training-rounds',
                         json={'sessionId': session_id, 'wordIds': [word_ids[1]]}, headers=bob)
    status = client.put(f'/api/errors/training-rounds/{round_id}/status', json={'status': 'completed'},
                        headers=bob)

    assert generated.status_code == 404
    assert manual.status_code == 404
    assert status.status_code == 404
    assert client.get('/api/errors/training-rounds?status=all', headers=bob).get_json()['data'] == []
    assert client.get('/api/errors/top-errors', headers=bob).get_json()['data'] == []
    assert client.get('/api/errors', headers=bob).get_json()['data'] == []
    assert client.get('/api/errors/stats', headers=bob).get_json()['data'] == []
    assert [row['id'] for row in client.get('/api/errors/training-rounds', headers=headers).get_json()['data']] == [
        round_id
    ]
