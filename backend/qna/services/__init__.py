# Services package init
"""
QnA Backend — Services Layer
==============================

What:  Business logic between the routes (HTTP) and the database.

Service Inventory:
    - TextCensor (abstract): interface for profanity censoring providers
    - BadWordsService: TextCensor backed by the external bad-words API
    - QuestionService: ownership-checked question store, censors on write
    - AnswerService: answers attached to questions, censors on write
    - AccountService: registration and login
    - auth_service: password hashing, session token issue/verification

Question and answer services take their TextCensor in the constructor, so
tests can pass a fake censor without patching module globals.
"""
