# Repositories package init
"""
Contacts API — Storage Layer
==============================

What:  Async SQLAlchemy access to the `contacts` table behind the
       ContactStore protocol (find / find_by_id / insert / update_by_id /
       delete_by_id).
How:   One ContactRepository per request, built around that request's
       AsyncSession. Services depend on the protocol, so unit tests can
       substitute an AsyncMock.
"""
