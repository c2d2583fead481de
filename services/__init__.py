from services.base import Page, PageRequest
from services.comments import CommentService
from services.dashboard import DashboardService
from services.likes import LikeService
from services.playlists import PlaylistService
from services.sessions import SessionStore
from services.subscriptions import SubscriptionService
from services.tweets import TweetService
from services.users import UserService
from services.videos import VideoService
