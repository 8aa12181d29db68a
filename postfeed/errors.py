"""
Error taxonomy for the post endpoints.
Each error carries the HTTP status and the message returned to the caller.
"""


class PostError(Exception):
    status_code = 500
    message = 'Server Error'

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class NotFound(PostError):
    status_code = 404
    message = 'Post not found'


class Unauthorized(PostError):
    status_code = 401
    message = 'User not authorised'


class DuplicateLike(PostError):
    status_code = 400
    message = 'Post already liked'


class NotLiked(PostError):
    status_code = 400
    message = 'Post has not been liked'
