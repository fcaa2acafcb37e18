from rest_framework import permissions


class OwnedQuerysetMixin:
    """
    For generic views over models with a ``user`` foreign key: only the
    requesting user's rows are visible, and new rows are saved against them.
    A row owned by someone else therefore 404s exactly like a missing one.
    """

    permission_classes = [permissions.IsAuthenticated]
    model = None

    def get_queryset(self):
        return self.model.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)
