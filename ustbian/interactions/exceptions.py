# Domain exceptions raised by the interactions service layer.
# The controller layer catches these and converts them to HTTPException.


class AlreadyLikedError(Exception):
    pass


class AlreadySavedError(Exception):
    pass


class PostUnavailableError(Exception):
    """Raised when liking or saving a post that does not exist (surfaced as 409)."""

    def __init__(self, post_id) -> None:
        self.post_id = post_id
        super().__init__(f"Post {post_id} does not exist")


class PostNotFoundError(Exception):
    def __init__(self, post_id) -> None:
        self.post_id = post_id
        super().__init__(f"Post {post_id} not found")


class CommentNotFoundError(Exception):
    def __init__(self, comment_id) -> None:
        self.comment_id = comment_id
        super().__init__(f"Comment {comment_id} not found")


class CommentAuthorNotFoundError(Exception):
    def __init__(self, user_id) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class CommentAccessDeniedError(Exception):
    pass


class CommentRateLimitError(Exception):
    """Raised when a user exceeds 5 comments per minute."""
    pass
