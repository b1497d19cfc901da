from django.conf import settings
from rest_framework import serializers


class ListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(max_length=128, required=False, allow_blank=True)
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1)
    includeInactive = serializers.BooleanField(required=False, default=False)

    def validate_pageSize(self, v):
        if v > settings.PAGE_SIZE_MAX:
            raise serializers.ValidationError(f'pageSize tidak boleh lebih dari {settings.PAGE_SIZE_MAX}')
        return v


class DeleteSerializer(serializers.Serializer):
    hard = serializers.BooleanField(required=False, default=False)


def paginate(qs, page=None, page_size=None):
    """Slice ``qs`` for ``page``; without a page size everything is one page."""
    total = qs.count()
    page = page or 1
    if not page_size:
        return list(qs), {'total': total, 'page': 1, 'pageSize': total}
    start = (page - 1) * page_size
    return list(qs[start:start + page_size]), {'total': total, 'page': page, 'pageSize': page_size}
