"""
Central Signal Registry for Event-Driven Architecture.

Uses Flask's built-in blinker integration to enable decoupled
communication between modules.

Usage:
    # Publisher (sender)
    from wordmem_app.core.signals import session_completed
    session_completed.send(app, user_id=1, session_id=2, ...)

    # Subscriber (receiver)
    @session_completed.connect
    def on_session_completed(sender, **kwargs):
        ...
"""
from blinker import Namespace

# ============================================
# Account Signals
# ============================================
account_signals = Namespace()

# Signal: Fired when a new user registers
# Payload: user (User object)
user_registered = account_signals.signal('user_registered')

# ============================================
# Training Signals
# ============================================
training_signals = Namespace()

# Signal: Fired when a training session's results are recorded
# Payload: user_id, session_id, total_words, correct_words, error_words,
#          accuracy_rate, total_time_seconds
session_completed = training_signals.signal('session_completed')

# Signal: Fired when a remedial round is generated from session errors
# Payload: session_id, round_id, word_ids
error_round_created = training_signals.signal('error_round_created')

# ============================================
# Content Signals
# ============================================
content_signals = Namespace()

# Signal: Fired when words are imported into a wordbook (upload, batch, seed)
# Payload: wordbook_id, inserted, skipped, source
words_imported = content_signals.signal('words_imported')
