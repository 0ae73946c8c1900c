# Domain exceptions raised by the posts service layer.
# The controller layer catches these and converts them to HTTPException.


class PostNotFoundError(Exception):
    def __init__(self, post_id) -> None:
        self.post_id = post_id
        super().__init__(f"Post {post_id} not found")


class PostAccessDeniedError(Exception):
    """Raised when someone other than the author edits or deletes a post."""
    pass


class AuthorNotFoundError(Exception):
    def __init__(self, user_id) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")
