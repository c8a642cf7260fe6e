"""
Archive content models.

Admin posts, works with their chapters, tags, and the comments that can be
left on any of them. Comments are attached through a generic relation so the
notification layer can tell which kind of object a comment belongs to.
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey, GenericRelation
from django.contrib.contenttypes.models import ContentType
from django.db import models


class AdminPost(models.Model):
    """News post written by archive admins."""

    title = models.CharField(max_length=255)
    content = models.TextField()
    comments = GenericRelation('archive.Comment', related_query_name='admin_post')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'admin post'
        verbose_name_plural = 'admin posts'
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    @property
    def commentable_name(self):
        return self.title


class Work(models.Model):
    """
    A posted work.

    Spam detection sets `spam` and `spam_score`; flagged works are collected
    into the periodic spam alert sent to admins.
    """

    title = models.CharField(max_length=255)
    authors = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name='works',
        blank=True,
    )
    summary = models.TextField(blank=True)
    spam = models.BooleanField(default=False, db_index=True)
    spam_score = models.PositiveIntegerField(default=0)
    spam_checked_at = models.DateTimeField(null=True, blank=True)
    comments = GenericRelation('archive.Comment', related_query_name='work')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'work'
        verbose_name_plural = 'works'
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    @property
    def commentable_name(self):
        return self.title


class Chapter(models.Model):
    work = models.ForeignKey(Work, on_delete=models.CASCADE, related_name='chapters')
    position = models.PositiveIntegerField(default=1)
    title = models.CharField(max_length=255, blank=True)
    content = models.TextField()
    comments = GenericRelation('archive.Comment', related_query_name='chapter')

    class Meta:
        verbose_name = 'chapter'
        verbose_name_plural = 'chapters'
        ordering = ['work', 'position']

    def __str__(self):
        return f"{self.work.title}, Chapter {self.position}"

    @property
    def commentable_name(self):
        return self.work.title


class Tag(models.Model):
    name = models.CharField(max_length=100, unique=True)
    comments = GenericRelation('archive.Comment', related_query_name='tag')

    class Meta:
        verbose_name = 'tag'
        verbose_name_plural = 'tags'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def commentable_name(self):
        return f"the tag {self.name}"


class Comment(models.Model):
    """
    Comment on an admin post, chapter, tag, or (as a reply) another comment.

    comment_content is stored as sanitized HTML (see
    apps.notifications.policy.sanitize_html). Deleting a comment deletes its
    replies.
    """

    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.PositiveBigIntegerField()
    commentable = GenericForeignKey('content_type', 'object_id')
    replies = GenericRelation('self', related_query_name='parent_comment')

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='comments',
    )
    name = models.CharField(max_length=100, blank=True)
    email = models.EmailField(blank=True)
    comment_content = models.TextField()

    created_at = models.DateTimeField(auto_now_add=True)
    edited_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = 'comment'
        verbose_name_plural = 'comments'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['content_type', 'object_id'], name='archive_com_content_3b7d2a_idx'),
        ]

    def __str__(self):
        return f"Comment by {self.commenter_name} on {self.parent}"

    @property
    def commenter_name(self):
        if self.user_id:
            return self.user.login
        return self.name

    @property
    def parent(self):
        """The admin post, chapter or tag at the top of the reply chain."""
        commentable = self.commentable
        while isinstance(commentable, Comment):
            commentable = commentable.commentable
        return commentable

    @property
    def parent_type(self):
        """Class name of the parent, e.g. "AdminPost"."""
        parent = self.parent
        if parent is None:
            return None
        return type(parent).__name__

    @property
    def is_edited(self):
        return self.edited_at is not None
