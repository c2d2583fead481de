"""
Playlists.

Visibility: the owner sees every playlist; everybody else only public ones.
Reading a private playlist by id is forbidden to non-owners, unlisted ones
are reachable by id but never listed.
"""
from __future__ import annotations

from typing import Any, Dict

from sqlalchemy import func, select

from models.base_model import utcnow
from models.playlist import Playlist, PlaylistPrivacy, playlist_videos
from models.schemas.playlist import PlaylistCreateSchema, PlaylistOutSchema, PlaylistUpdateSchema
from models.schemas.video import VideoOutSchema
from models.user import User
from models.video import Video
from services.base import OwnedResourceService, PageRequest
from utils.exceptions import ForbiddenError, ValidationError

videos_out_schema = VideoOutSchema(many=True)


class PlaylistService(OwnedResourceService):
    model = Playlist
    label = "playlist"
    plural = "playlists"
    create_schema = PlaylistCreateSchema()
    update_schema = PlaylistUpdateSchema()
    out_schema = PlaylistOutSchema()

    sort_columns = {
        "created_at": Playlist.created_at,
        "updated_at": Playlist.updated_at,
        "title": Playlist.title,
        "views": Playlist.views,
    }
    default_sort = ("updated_at", True)

    def list_for_user(self, user_id, viewer_id=None, request: PageRequest = PageRequest()) -> Dict[str, Any]:
        owner = self._get(User, user_id, "user")
        query = self.session.query(Playlist).filter(Playlist.owner_id == owner.id)
        if str(viewer_id) != owner.id:
            query = query.filter(Playlist.privacy == PlaylistPrivacy.PUBLIC)

        totals = dict(
            self.session.execute(
                select(playlist_videos.c.playlist_id, func.count())
                .join(Playlist, Playlist.id == playlist_videos.c.playlist_id)
                .where(Playlist.owner_id == owner.id)
                .group_by(playlist_videos.c.playlist_id)
            ).all()
        )

        def serialize(playlist):
            item = self.view(playlist)
            item["total_videos"] = totals.get(playlist.id, 0)
            return item

        return self._paginate(query, request, serialize)

    def get(self, playlist_id, viewer_id=None) -> Dict[str, Any]:
        playlist = self.load(playlist_id)
        is_owner = playlist.is_owned_by(viewer_id)
        if playlist.privacy == PlaylistPrivacy.PRIVATE and not is_owner:
            raise ForbiddenError("This playlist is private")

        if not is_owner:
            playlist.views = (playlist.views or 0) + 1
            self._commit()

        videos = [v for v in playlist.videos if v.is_published]
        item = self.view(playlist)
        item["videos"] = videos_out_schema.dump(videos)
        item["total_videos"] = len(videos)
        item["total_duration"] = sum(v.duration or 0 for v in videos)
        return item

    def add_video(self, actor_id, video_id, playlist_id) -> Dict[str, Any]:
        playlist = self.load_owned(actor_id, playlist_id, action="modify")
        video = self._get(Video, video_id, "video")
        if not video.is_published:
            raise ValidationError("Only published videos can be added to a playlist")
        if any(v.id == video.id for v in playlist.videos):
            raise ValidationError("Video is already in the playlist")
        playlist.videos.append(video)
        self._touch(playlist)
        self._commit()
        return self.get(playlist.id, actor_id)

    def remove_video(self, actor_id, video_id, playlist_id) -> Dict[str, Any]:
        playlist = self.load_owned(actor_id, playlist_id, action="modify")
        video = self._get(Video, video_id, "video")
        if not any(v.id == video.id for v in playlist.videos):
            raise ValidationError("Video is not in the playlist")
        playlist.videos.remove(video)
        self._touch(playlist)
        self._commit()
        return self.get(playlist.id, actor_id)

    @staticmethod
    def _touch(playlist: Playlist) -> None:
        # membership changes live in the association table and would not bump updated_at
        playlist.updated_at = utcnow()
