"""
Admin configuration for archive app.
"""

from django.contrib import admin

from .models import AdminPost, Chapter, Comment, Tag, Work


@admin.register(AdminPost)
class AdminPostAdmin(admin.ModelAdmin):
    list_display = ('title', 'created_at')
    search_fields = ('title',)


class ChapterInline(admin.TabularInline):
    model = Chapter
    extra = 0


@admin.register(Work)
class WorkAdmin(admin.ModelAdmin):
    list_display = ('title', 'spam', 'spam_score', 'spam_checked_at', 'created_at')
    list_filter = ('spam',)
    search_fields = ('title', 'authors__login')
    filter_horizontal = ('authors',)
    inlines = [ChapterInline]


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    search_fields = ('name',)


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ('__str__', 'content_type', 'created_at', 'edited_at')
    list_filter = ('content_type',)
    readonly_fields = ('created_at', 'edited_at')
