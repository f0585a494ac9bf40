from . import admin, admin_auth, auth, comments, friend_requests, messages, notifications, posts, users

# Mount order; prefixes do not overlap
ROUTES = [
    ("/friend-requests", friend_requests.router),
    ("/admin", admin.router),
    ("/adminAuth", admin_auth.router),
    ("/notifications", notifications.router),
    ("/messages", messages.router),
    ("/auth", auth.router),
    ("/users", users.router),
    ("/posts", posts.router),
    ("/comments", comments.router),
]
