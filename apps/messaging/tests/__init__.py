"""
Tests for the messaging app.

Layout:
    conftest.py             Users, jobs, applications and API clients
    factories.py            factory_boy factories
    test_log.py             Message log append/find/mark_read
    test_gate.py            Initiation gate policies
    test_conversations.py   Conversation aggregation
    test_services.py        Send pipeline and thread fetch
    test_socket.py          Socket.IO gateway events
    test_views.py           HTTP query endpoints
"""
