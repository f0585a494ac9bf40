import json
import logging
import os
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from .api import BackendClient, BackendError, MediaFile
from .composer import MAX_CHARS, MediaStash, PostComposer
from .feed import FeedPage
from .storage import TOKEN_KEY, USER_KEY, LocalStorage

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

EMOJIS = ["😀", "😂", "😍", "👍", "🎉", "🚀", "💼", "🙏", "🔥", "👏"]
EMOJI_ACTION = "emoji:"


def _render_feed(
    request: Request,
    page: FeedPage,
    composer: PostComposer,
    media_key: str = "",
    status_code: int = 200,
):
    return templates.TemplateResponse(
        request,
        "feed.html",
        {
            "page": page,
            "composer": composer,
            "media_key": media_key,
            "max_chars": MAX_CHARS,
            "emojis": EMOJIS,
            "media_url": page.client.media_url,
        },
        status_code=status_code,
    )


def _login_redirect(auth: dict) -> RedirectResponse:
    response = RedirectResponse("/", status_code=303)
    response.set_cookie(TOKEN_KEY, auth["token"], httponly=True, samesite="lax")
    response.set_cookie(USER_KEY, json.dumps({"id": auth["user"]["id"], "name": auth["user"]["name"]}), samesite="lax")
    return response


def create_app(client: Optional[BackendClient] = None) -> FastAPI:
    app = FastAPI(title="Mini LinkedIn")
    app.state.client = client or BackendClient()
    app.state.media_stash = MediaStash()

    def pages(request: Request):
        storage = LocalStorage(request.cookies)
        page = FeedPage(app.state.client, storage)
        composer = PostComposer(app.state.client, storage)
        return page, composer

    @app.get("/", response_class=HTMLResponse)
    def home(request: Request):
        page, composer = pages(request)
        page.mount()
        return _render_feed(request, page, composer)

    @app.post("/compose", response_class=HTMLResponse)
    def compose(
        request: Request,
        content: str = Form(""),
        action: str = Form("post"),
        show_emoji_picker: bool = Form(False),
        media: Optional[UploadFile] = File(None),
        media_key: str = Form(""),
    ):
        page, composer = pages(request)
        composer.change(content)
        composer.show_emoji_picker = show_emoji_picker

        # File inputs come back empty on every render, so a picked file is stashed by key
        if media_key:
            composer.select_media(app.state.media_stash.pop(media_key))
        if media is not None and media.filename:
            composer.select_media(MediaFile(media.filename, media.content_type or "", media.file.read()))

        if action == "remove_media":
            composer.remove_media()
        elif action == "toggle_emoji":
            composer.toggle_emoji_picker()
        elif action.startswith(EMOJI_ACTION):
            composer.add_emoji(action[len(EMOJI_ACTION):])
        elif composer.error is None and composer.submit():
            return RedirectResponse("/", status_code=303)

        page.mount()
        media_key = app.state.media_stash.put(composer.media) if composer.media else ""
        return _render_feed(request, page, composer, media_key, status_code=400 if composer.error else 200)

    @app.get("/login", response_class=HTMLResponse)
    def login_form(request: Request):
        return templates.TemplateResponse(request, "login.html", {"error": None, "email": ""})

    @app.post("/login", response_class=HTMLResponse)
    def login(request: Request, email: str = Form(...), password: str = Form(...)):
        try:
            auth = app.state.client.login(email, password)
        except BackendError as e:
            logger.info("Login failed for %s: %s", email, e.message)
            return templates.TemplateResponse(
                request, "login.html", {"error": e.message, "email": email}, status_code=400
            )
        return _login_redirect(auth)

    @app.get("/register", response_class=HTMLResponse)
    def register_form(request: Request):
        return templates.TemplateResponse(request, "register.html", {"error": None, "name": "", "email": ""})

    @app.post("/register", response_class=HTMLResponse)
    def register(
        request: Request,
        name: str = Form(...),
        email: str = Form(...),
        password: str = Form(...),
    ):
        try:
            auth = app.state.client.register(name, email, password)
        except BackendError as e:
            return templates.TemplateResponse(
                request, "register.html", {"error": e.message, "name": name, "email": email}, status_code=400
            )
        return _login_redirect(auth)

    @app.get("/logout")
    def logout():
        response = RedirectResponse("/", status_code=303)
        response.delete_cookie(TOKEN_KEY)
        response.delete_cookie(USER_KEY)
        return response

    return app


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    uvicorn.run(create_app(), host="0.0.0.0", port=int(os.environ.get("FRONTEND_PORT", 3000)))


if __name__ == "__main__":
    main()
