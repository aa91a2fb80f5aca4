from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship
from shared_todos.database import Base


class TodoList(Base):
    __tablename__ = "todo_lists"

    id = Column(String(36), primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    created_by = Column(String(64), index=True, nullable=False)
    created_by_username = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    version = Column(Integer, nullable=False)

    tasks = relationship(
        "ListTask",
        back_populates="todo_list",
        cascade="all, delete-orphan",
        order_by="ListTask.position",
    )
    users = relationship(
        "ListMember",
        back_populates="todo_list",
        cascade="all, delete-orphan",
        order_by="ListMember.id",
    )

    # Every flush of the list row compares and bumps `version`
    __mapper_args__ = {"version_id_col": version}


class ListMember(Base):
    __tablename__ = "list_members"
    __table_args__ = (
        UniqueConstraint("list_id", "user_id", name="_list_member_uc"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    list_id = Column(String(36), ForeignKey("todo_lists.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    username = Column(String(50), nullable=True)
    is_guest = Column(Boolean, default=True, nullable=False)
    joined_at = Column(DateTime(timezone=True), nullable=False)

    todo_list = relationship("TodoList", back_populates="users")


class ListTask(Base):
    __tablename__ = "list_tasks"

    id = Column(String(36), primary_key=True, index=True)
    list_id = Column(String(36), ForeignKey("todo_lists.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    status = Column(String(10), default="new", nullable=False)  # new/open/closed
    created_by = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    last_updated_by = Column(String(50), nullable=True)
    deadline = Column(DateTime(timezone=True), nullable=True)

    todo_list = relationship("TodoList", back_populates="tasks")
