import weakref


class Resource:
    """Base class for :class:`~glyphlayout.resources.Buffer` and :class:`~glyphlayout.resources.Texture`.

    A resource is the CPU-side representation of data that a renderer
    uploads to the GPU. Glyphlayout never uploads anything itself: it marks
    resources as changed, and the renderer collects them from the
    ``resource_update_registry``.
    """

    _resource_counts = {}  # Just to track the number of buffers and textures alive
    _rev = 0  # integer hash

    def __init__(self):
        cname = self.__class__.__name__
        Resource._resource_counts[cname] = Resource._resource_counts.get(cname, 0) + 1

    def __del__(self):
        cname = self.__class__.__name__
        Resource._resource_counts[cname] -= 1

    def _bump_rev(self):
        Resource._rev += 1
        self._rev = Resource._rev

    def _mark_for_sync(self):
        resource_update_registry._mark_for_sync(self)

    @property
    def rev(self):
        """The revision number (integer).

        The number changes when the data is marked for upload. The number is
        monotonically increasing and globally unique (no two buffers/textures
        have the same rev). This makes that it can be used as hash for the data
        content.
        """
        return self._rev


class ResourceUpdateRegistry:
    """Singleton registry to keep track of resources that have pending uploads."""

    def __init__(self):
        self._syncable = weakref.WeakSet()

    def _mark_for_sync(self, resource):
        """Register the given resource for synchronization."""
        if not isinstance(resource, Resource):
            raise TypeError("Given object is not a Resource")
        self._syncable.add(resource)

    def get_syncable_resources(self, *, flush=False):
        """Get the set of resources that need syncing. If setting flush
        to True, the caller is responsible for syncing the resources.
        """
        syncable = set(self._syncable)
        if flush:
            self._syncable.clear()
        return syncable


resource_update_registry = ResourceUpdateRegistry()
