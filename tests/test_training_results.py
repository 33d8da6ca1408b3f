"""
Tests for the training session result recorder.

Covers:
- aggregate arithmetic and error counter upserts
- all-or-nothing behaviour when a write fails
- rejection of resubmitted results
"""
import pytest

from wordmem_app import db
from wordmem_app.models import TrainingSession, TrainingStats, Wordbook, WordError
from wordmem_app.modules.training.logics.session_stats import (
    accuracy_rate,
    normalize_settings,
    summarize_results,
)
from wordmem_app.modules.training.schemas import ResultItem


@pytest.fixture
def session_setup(client, auth_headers, wordbook_factory):
    headers = auth_headers()
    _, word_ids = wordbook_factory(name='System', kind=Wordbook.KIND_SYSTEM, words=['apple', 'banana', 'cherry'])
    response = client.post('/api/training/sessions', json={
        'sessionName': 'Morning drill',
        'wordIds': word_ids,
        'settings': {'accent': 'uk'},
    }, headers=headers)
    assert response.status_code == 201, response.get_json()
    return headers, response.get_json()['data']['id'], word_ids


class TestSummaries:

    def test_accuracy_handles_empty_session(self):
        assert accuracy_rate(0, 0) == 0.0

    def test_summary_counts_and_rounding(self):
        items = [
            ResultItem(wordId=1, isCorrect=True, timeSpent=2.4),
            ResultItem(wordId=2, isCorrect=False, timeSpent=3.3),
            ResultItem(wordId=2, isCorrect=False),
        ]
        stats = summarize_results(items)
        assert stats == {
            'total_words': 3,
            'correct_words': 1,
            'error_words': 2,
            'accuracy_rate': 33.33,
            'total_time_seconds': 6,
        }

    def test_settings_defaults_and_unknown_keys(self):
        settings = normalize_settings({'accent': 'UK', 'theme': 'dark'})
        assert settings == {'repeatCount': 1, 'interval': 3, 'accent': 'uk', 'speed': 1.0, 'theme': 'dark'}

    def test_settings_reject_bad_accent(self):
        with pytest.raises(ValueError):
            normalize_settings({'accent': 'fr'})


def test_create_session_validates_words(client, session_setup):
    headers, _, word_ids = session_setup

    empty = client.post('/api/training/sessions', json={'sessionName': 'x', 'wordIds': []}, headers=headers)
    unknown = client.post('/api/training/sessions', json={'sessionName': 'x', 'wordIds': [9999]}, headers=headers)

    assert empty.status_code == 400
    assert unknown.status_code == 400


def test_session_detail_keeps_word_order(client, session_setup):
    headers, session_id, word_ids = session_setup

    data = client.get(f'/api/training/sessions/{session_id}', headers=headers).get_json()['data']

    assert data['word_ids'] == word_ids
    assert [word['word'] for word in data['words']] == ['apple', 'banana', 'cherry']
    assert data['settings']['accent'] == 'uk'
    assert data['settings']['repeatCount'] == 1


def test_results_scenario_counts_and_upserts(app, client, session_setup):
    headers, session_id, word_ids = session_setup
    results = [
        {'wordId': word_ids[0], 'isCorrect': True, 'timeSpent': 3},
        {'wordId': word_ids[1], 'isCorrect': False, 'userInput': 'banan', 'timeSpent': 4},
        {'wordId': word_ids[1], 'isCorrect': False, 'userInput': 'bananna', 'timeSpent': 5},
    ]

    response = client.post(f'/api/training/sessions/{session_id}/results', json={'results': results},
                           headers=headers)

    assert response.status_code == 200, response.get_json()
    assert response.get_json()['data'] == {
        'total_words': 3,
        'correct_words': 1,
        'error_words': 2,
        'accuracy_rate': 33.33,
        'total_time_seconds': 12,
    }
    with app.app_context():
        errors = WordError.query.filter_by(session_id=session_id).all()
        assert len(errors) == 1
        assert errors[0].word_id == word_ids[1]
        assert errors[0].error_count == 2
        assert errors[0].error_type == 'spelling'
        assert errors[0].correct_answer == 'banana'
        assert errors[0].user_input == 'bananna'
        session = db.session.get(TrainingSession, session_id)
        assert session.status == TrainingSession.STATUS_COMPLETED
        assert session.completed_at is not None


def test_resubmission_is_rejected_without_writes(app, client, session_setup):
    headers, session_id, word_ids = session_setup
    payload = {'results': [{'wordId': word_ids[0], 'isCorrect': False}]}
    url = f'/api/training/sessions/{session_id}/results'

    assert client.post(url, json=payload, headers=headers).status_code == 200
    second = client.post(url, json=payload, headers=headers)

    assert second.status_code == 409
    with app.app_context():
        assert TrainingStats.query.filter_by(session_id=session_id).count() == 1
        assert WordError.query.filter_by(session_id=session_id).one().error_count == 1


def test_failed_write_rolls_back_everything(app, client, session_setup):
    headers, session_id, word_ids = session_setup
    # A stats row already present makes the stats insert violate its unique key
    with app.app_context():
        db.session.add(TrainingStats(session_id=session_id, total_words=0, correct_words=0, error_words=0,
                                     accuracy_rate=0, total_time_seconds=0))
        db.session.commit()

    response = client.post(f'/api/training/sessions/{session_id}/results', json={
        'results': [{'wordId': word_ids[0], 'isCorrect': False}],
    }, headers=headers)

    assert response.status_code == 500
    with app.app_context():
        assert WordError.query.filter_by(session_id=session_id).count() == 0
        assert db.session.get(TrainingSession, session_id).status == TrainingSession.STATUS_ACTIVE


def test_results_reject_words_outside_session(client, session_setup, wordbook_factory):
    headers, session_id, _ = session_setup
    _, other_ids = wordbook_factory(name='Other', kind=Wordbook.KIND_SYSTEM, words=['zebra'])

    response = client.post(f'/api/training/sessions/{session_id}/results', json={
        'results': [{'wordId': other_ids[0], 'isCorrect': False}],
    }, headers=headers)

    assert response.status_code == 400


def test_results_reject_unknown_error_type(client, session_setup):
    headers, session_id, word_ids = session_setup

    response = client.post(f'/api/training/sessions/{session_id}/results', json={
        'results': [{'wordId': word_ids[0], 'isCorrect': False, 'errorType': 'grammar'}],
    }, headers=headers)

    assert response.status_code == 400


def test_sessions_are_private(client, auth_headers, session_setup):
    _, session_id, _ = session_setup
    bob = auth_headers('bob')

    assert client.get(f'/api/training/sessions/{session_id}', headers=bob).status_code == 404
    assert client.get('/api/training/sessions', headers=bob).get_json()['data'] == []


def test_session_list_reports_counts(client, session_setup):
    headers, session_id, word_ids = session_setup
    client.post(f'/api/training/sessions/{session_id}/results', json={'results': [
        {'wordId': word_ids[0], 'isCorrect': False},
        {'wordId': word_ids[0], 'isCorrect': False},
        {'wordId': word_ids[1], 'isCorrect': False, 'errorType': 'recognition'},
    ]}, headers=headers)

    sessions = client.get('/api/training/sessions', headers=headers).get_json()['data']

    assert len(sessions) == 1
    assert sessions[0]['error_count'] == 3
    assert sessions[0]['word_count'] == 3


def test_delete_session_cascades(app, client, session_setup):
    headers, session_id, word_ids = session_setup
    client.post(f'/api/training/sessions/{session_id}/results', json={
        'results': [{'wordId': word_ids[0], 'isCorrect': False}],
    }, headers=headers)

    assert client.delete(f'/api/training/sessions/{session_id}', headers=headers).status_code == 200
    with app.app_context():
        assert WordError.query.count() == 0
        assert TrainingStats.query.count() == 0
