"""Book catalogue endpoints, including title and author keyword search."""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from .. import services
from ..auth import get_current_admin
from ..database import get_session
from ..schemas import BookIn, BookOut
from .common import IdPath, deleted

router = APIRouter(prefix="/api/admin/books", tags=["books"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=List[BookOut])
def list_books(db: Session = Depends(get_session)):
    return services.BookService(db).list()


@router.get("/title/{title}", response_model=BookOut)
def get_book_by_title(title: str, db: Session = Depends(get_session)):
    return services.BookService(db).get_by_title(title)


@router.get("/author/{author}", response_model=List[BookOut])
def list_books_by_author(author: str, db: Session = Depends(get_session)):
    return services.BookService(db).list_by_author(author)


@router.get("/search/title", response_model=List[BookOut])
def search_books_by_title(keyword: str = Query(...), db: Session = Depends(get_session)):
    """Case-insensitive substring match on the title."""
    return services.BookService(db).search_title(keyword)


@router.get("/search/author", response_model=List[BookOut])
def search_books_by_author(keyword: str = Query(...), db: Session = Depends(get_session)):
    return services.BookService(db).search_author(keyword)


@router.get("/{book_id}", response_model=BookOut)
def get_book(book_id: IdPath, db: Session = Depends(get_session)):
    return services.BookService(db).get(book_id)


@router.post("", response_model=BookOut, status_code=201)
def create_book(payload: BookIn, db: Session = Depends(get_session)):
    return services.BookService(db).create(payload.title, payload.author, payload.description)


@router.put("/{book_id}", response_model=BookOut)
def update_book(book_id: IdPath, payload: BookIn, db: Session = Depends(get_session)):
    return services.BookService(db).update(
        book_id, title=payload.title, author=payload.author, description=payload.description
    )


@router.delete("/{book_id}")
def delete_book(book_id: IdPath, db: Session = Depends(get_session)):
    services.BookService(db).delete(book_id)
    return deleted("Book")
