"""Message migration component.

Posts become messages on their project's first board and their comments
become replies to that message.
"""

from basecamp2redmine.migrations.base_migration import BaseMigration
from basecamp2redmine.models import ComponentResult
from basecamp2redmine.models.operations import (
    AUTHOR,
    Announce,
    Create,
    Handle,
    Lookup,
    RecordBlock,
    Report,
    Save,
)
from basecamp2redmine.type_definitions import Comment, Post
from basecamp2redmine.utils.text import clean_html, sanitize

SIGNATURE_SEPARATOR = "\n\n-- \n"


def message_content(body: str, author_name: str) -> str:
    """Message body followed by a mail-style signature naming the Basecamp author."""
    return body + SIGNATURE_SEPARATOR + author_name


class MessageMigration(BaseMigration):
    """Generates Redmine board messages for Basecamp posts and their comments."""

    TABLE = "messages"

    def build(self, result: ComponentResult) -> None:
        reply_prefix = self.settings.message_reply_prefix
        subject_length = self.settings.message_subject_length - len(reply_prefix)

        for post in self.backup.posts:
            result.total_count += 1
            title = clean_html(sanitize(post.title))
            short_title = self.shorten(title, subject_length)
            trace = f"post {post.id} ('{short_title}') [in project {post.project_id}]"

            if not self.filters.posts.included(post.id):
                self.skip(result, post.id, f"Skipping {trace}")
                continue

            project = self.resolve_parent("projects", post.project_id)
            if project is None:
                self.skip(result, post.id, f"Skipping {trace}: project {post.project_id} was not imported")
                continue

            target = self.tables.register("messages", post.id)
            self.items.append(self._post_block(post, target, project, short_title))
            for comment in post.comments:
                self.items.append(self._comment_block(post, comment, project, reply_prefix + short_title))

            result["comments"] = result.details.get("comments", 0) + len(post.comments)

    def _post_block(self, post: Post, target: Handle, project: Handle, short_title: str) -> RecordBlock:
        board = project.attr("boards", "first")
        attributes = {
            "board": board,
            "subject": short_title,
            "content": message_content(clean_html(sanitize(post.body)), sanitize(post.author_name)),
        }
        if post.posted_on:
            attributes["created_on"] = post.posted_on
        attributes["author"] = AUTHOR

        return RecordBlock(
            announce=Announce(f"About to create post {post.id} as Redmine message under project {post.project_id}."),
            lookup=Lookup(target, "Message", {"board_id": board.id, "subject": short_title, "parent_id": None}),
            create=[
                Create(target, "Message", attributes),
                Save(target),
                Report(target, " Saved as Message ID "),
            ],
            existing=[Report(target, " Exists as Message ID ")],
        )

    def _comment_block(self, post: Post, comment: Comment, project: Handle, subject: str) -> RecordBlock:
        # Comments are nested in their post, so the parent is always registered
        parent = self.tables.resolve("messages", comment.commentable_id)
        target = self.tables.register("comments", comment.id)
        board = project.attr("boards", "first")

        conditions = {"board_id": board.id, "subject": subject, "parent_id": parent.id}
        attributes = {
            "board": board,
            "subject": subject,
            "content": message_content(clean_html(sanitize(comment.body)), sanitize(comment.author_name)),
        }
        if comment.created_at:
            conditions["created_on"] = comment.created_at
            attributes["created_on"] = comment.created_at
        attributes["author"] = AUTHOR
        attributes["parent"] = parent

        return RecordBlock(
            announce=Announce(
                f"About to create post comment {comment.id} as Redmine reply to post {post.id} "
                f"under project {post.project_id}.",
            ),
            lookup=Lookup(target, "Message", conditions),
            create=[
                Create(target, "Message", attributes),
                Save(target),
                Report(target, " Saved comment as Message ID "),
            ],
            existing=[Report(target, " Exists comment as Message ID ")],
        )
