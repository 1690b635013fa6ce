from readtrack.models.user import User
from readtrack.models.book import Book
from readtrack.models.reading_progress import ReadingProgress, ReadingStatus
from readtrack.models.summary import Summary
from readtrack.models.comment import Comment, CommentKind

__all__ = ["User", "Book", "ReadingProgress", "ReadingStatus", "Summary", "Comment", "CommentKind"]
