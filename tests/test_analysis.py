"""Analysis endpoints over recorded training data."""
from datetime import timedelta

import pytest

from wordmem_app import db
from wordmem_app.models import TrainingSession, Wordbook, WordError
from wordmem_app.utils.time_utils import utcnow


def _run_session(client, headers, name, word_ids, results):
    created = client.post('/api/training/sessions', json={'sessionName': name, 'wordIds': word_ids},
                          headers=headers)
    session_id = created.get_json()['data']['id']
    response = client.post(f'/api/training/sessions/{session_id}/results', json={'results': results},
                           headers=headers)
    assert response.status_code == 200, response.get_json()
    return session_id


@pytest.fixture
def practice_data(client, auth_headers, wordbook_factory):
    headers = auth_headers()
    _, word_ids = wordbook_factory(name='System', kind=Wordbook.KIND_SYSTEM,
                                   words=['apple', 'banana', 'cherry', 'damson', 'elder'])
    apple, banana, cherry, damson, _elder = word_ids
    first = _run_session(client, headers, 'First', [apple, banana, cherry], [
        {'wordId': apple, 'isCorrect': True, 'timeSpent': 10},
        {'wordId': banana, 'isCorrect': False, 'timeSpent': 10},
        {'wordId': banana, 'isCorrect': False, 'timeSpent': 10},
        {'wordId': banana, 'isCorrect': False, 'timeSpent': 10},
        {'wordId': cherry, 'isCorrect': False, 'errorType': 'pronunciation', 'timeSpent': 10},
    ])
    second = _run_session(client, headers, 'Second', [apple, damson], [
        {'wordId': apple, 'isCorrect': True, 'timeSpent': 5},
        {'wordId': damson, 'isCorrect': True, 'timeSpent': 5},
    ])
    return headers, word_ids, (first, second)


def test_analysis_requires_auth(client):
    assert client.get('/api/analysis/overview').status_code == 401


def test_overview_counts_and_percentages(client, practice_data):
    headers, word_ids, _ = practice_data

    data = client.get('/api/analysis/overview?days=30', headers=headers).get_json()['data']

    basic = data['basic_stats']
    assert basic['total_sessions'] == 2
    assert basic['total_words'] == 4
    assert basic['total_errors'] == 4
    assert basic['avg_accuracy'] == 60.0  # (20 + 100) / 2
    assert basic['total_time_seconds'] == 60
    assert [row['error_type'] for row in data['error_types']] == ['spelling', 'pronunciation']
    assert sum(row['percentage'] for row in data['error_types']) == pytest.approx(100, abs=0.02)
    assert data['top_error_words'][0]['word'] == 'banana'
    assert data['top_error_words'][0]['error_percentage'] == 75.0
    assert data['daily_progress'][0]['sessions_count'] == 2
    assert data['weekly_trend'][0]['period'].count('-W') == 1
    assert data['period'] == '30 days'


def test_overview_ignores_sessions_outside_window(app, client, practice_data):
    headers, _, (first, _second) = practice_data
    with app.app_context():
        db.session.get(TrainingSession, first).created_at = utcnow() - timedelta(days=40)
        for error in WordError.query.filter_by(session_id=first).all():
            error.created_at = utcnow() - timedelta(days=40)
            error.updated_at = utcnow() - timedelta(days=40)
        db.session.commit()

    data = client.get('/api/analysis/overview?days=30', headers=headers).get_json()['data']

    assert data['basic_stats']['total_sessions'] == 1
    assert data['basic_stats']['total_errors'] == 0
    assert data['error_types'] == []


def test_session_analysis(client, practice_data):
    headers, word_ids, (first, _second) = practice_data

    data = client.get(f'/api/analysis/session/{first}', headers=headers).get_json()['data']

    assert data['session']['stats']['accuracy_rate'] == 20.0
    assert len(data['errors']) == 2
    assert data['error_type_stats'][0] == {'error_type': 'spelling', 'count': 3, 'percentage': 75.0}
    assert [row['word'] for row in data['word_difficulty']] == ['banana', 'cherry']
    assert data['word_difficulty'][1]['difficulty_percentage'] == 25.0


def test_session_analysis_of_missing_session(client, practice_data):
    headers, _, _ = practice_data

    assert client.get('/api/analysis/session/999', headers=headers).status_code == 404


@pytest.mark.parametrize('group_by', ['hour', 'day', 'week', 'month'])
def test_progress_buckets(client, practice_data, group_by):
    headers, _, _ = practice_data

    data = client.get(f'/api/analysis/progress?groupBy={group_by}', headers=headers).get_json()['data']

    assert data['group_by'] == group_by
    assert sum(row['sessions_count'] for row in data['progress']) == 2
    assert sum(row['total_errors'] for row in data['progress']) == 4


def test_progress_rejects_bad_arguments(client, practice_data):
    headers, _, _ = practice_data

    assert client.get('/api/analysis/progress?groupBy=year', headers=headers).status_code == 400
    assert client.get('/api/analysis/progress?days=0', headers=headers).status_code == 400


def test_word_mastery_tiers(client, practice_data):
    headers, word_ids, _ = practice_data
    apple, banana, cherry, damson, _elder = word_ids

    data = client.get('/api/analysis/word-mastery?days=30', headers=headers).get_json()['data']

    levels = {row['word_id']: row['mastery_level'] for row in data['word_mastery']}
    assert levels == {apple: 'mastered', damson: 'mastered', cherry: 'good', banana: 'needs_practice'}
    assert data['word_mastery'][0]['word_id'] == apple  # two sessions, no errors
    assert [row['mastery_level'] for row in data['mastery_stats']] == [
        'mastered', 'good', 'needs_practice', 'difficult'
    ]
    assert [row['word_count'] for row in data['mastery_stats']] == [2, 1, 1, 0]
    assert sum(row['percentage'] for row in data['mastery_stats']) == pytest.approx(100, abs=0.02)


def test_word_mastery_limit(client, practice_data):
    headers, _, _ = practice_data

    data = client.get('/api/analysis/word-mastery?limit=2', headers=headers).get_json()['data']

    assert len(data['word_mastery']) == 2
    assert sum(row['word_count'] for row in data['mastery_stats']) == 4


def test_recommendations(app, client, practice_data):
    headers, word_ids, (first, _second) = practice_data
    apple, banana, cherry, damson, elder = word_ids
    with app.app_context():
        error = WordError.query.filter_by(session_id=first, word_id=banana).one()
        error.created_at = utcnow() - timedelta(days=4)
        db.session.commit()

    data = client.get('/api/analysis/recommendations', headers=headers).get_json()['data']

    practice = data['practice_recommendations']
    assert [row['word_id'] for row in practice] == [banana]
    assert practice[0]['error_count'] == 3
    assert practice[0]['error_frequency'] == 0.75
    assert practice[0]['days_since_last_error'] == 0
    assert [row['word_id'] for row in data['new_words']] == [elder]
    assert data['total_recommendations'] == 2


def test_views_exclude_other_users_data(client, auth_headers, practice_data):
    _, word_ids, (first, _second) = practice_data
    bob = auth_headers('bob')

    overview = client.get('/api/analysis/overview', headers=bob).get_json()['data']
    mastery = client.get('/api/analysis/word-mastery', headers=bob).get_json()['data']
    recommendations = client.get('/api/analysis/recommendations', headers=bob).get_json()['data']
    progress = client.get('/api/analysis/progress', headers=bob).get_json()['data']

    assert overview['basic_stats']['total_sessions'] == 0
    assert overview['basic_stats']['total_errors'] == 0
    assert overview['error_types'] == []
    assert overview['top_error_words'] == []
    assert mastery['word_mastery'] == []
    assert sum(row['word_count'] for row in mastery['mastery_stats']) == 0
    assert recommendations['practice_recommendations'] == []
    # none of the system words has been in one of bob's sessions
    assert sorted(row['word_id'] for row in recommendations['new_words']) == sorted(word_ids)
    assert progress['progress'] == []
    assert client.get(f'/api/analysis/session/{first}', headers=bob).status_code == 404
