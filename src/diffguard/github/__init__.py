"""GitHub glue for the review bot.

Reads pull request metadata, files and review comments, and posts
review comments, PR comments and thread replies through the ``gh`` CLI.
"""
