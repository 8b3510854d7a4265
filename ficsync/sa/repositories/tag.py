# ficsync/sa/repositories/tag.py

from typing import Optional, List, Dict
from sqlalchemy import desc
from sqlalchemy.orm import Session

from ficsync.models import TagType
from ficsync.sa.models import Tag, WorkTag


class TagRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, name: str) -> Optional[Tag]:
        return self.session.query(Tag).filter(Tag.name == name).first()

    def get_all(self, tag_type: Optional[TagType] = None, limit: Optional[int] = None) -> List[Tag]:
        """Get tags ordered by usage, optionally of one type"""
        query = self.session.query(Tag)
        if tag_type is not None:
            query = query.filter(Tag.type == tag_type.value)
        query = query.order_by(desc(Tag.count), Tag.name)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def search(self, query: str, limit: int = 50, offset: int = 0) -> List[Tag]:
        return (
            self.session.query(Tag)
            .filter(Tag.name.ilike(f"%{query}%"))
            .order_by(desc(Tag.count))
            .offset(offset)
            .limit(limit)
            .all()
        )

    def get_tags_for_work(self, work_id: str) -> List[Tag]:
        return (
            self.session.query(Tag)
            .join(WorkTag, WorkTag.tag_name == Tag.name)
            .filter(WorkTag.work_id == work_id)
            .all()
        )

    def get_work_ids_for_tag(self, name: str) -> List[str]:
        rows = self.session.query(WorkTag.work_id).filter(WorkTag.tag_name == name).all()
        return [row.work_id for row in rows]

    def _refresh_counts(self, names: List[str]) -> None:
        for name in set(names):
            tag = self.get(name)
            if tag is not None:
                tag.count = self.session.query(WorkTag).filter(WorkTag.tag_name == name).count()

    def sync_work_tags(self, work_id: str, groups: Dict[TagType, List[str]]) -> None:
        """
        Replace the tag links of a work. The caller commits.

        Args:
            work_id: The work being stored
            groups: Labels grouped by tag type
        """
        self.session.flush()
        previous = self.get_tag_names_for_work(work_id)
        self.session.query(WorkTag).filter(WorkTag.work_id == work_id).delete(synchronize_session=False)

        names = []
        for tag_type, labels in groups.items():
            for label in labels:
                if not label or label in names:
                    continue
                names.append(label)
                if self.get(label) is None:
                    self.session.add(Tag(name=label, type=tag_type.value, count=0))
                self.session.add(WorkTag(work_id=work_id, tag_name=label))
        self.session.flush()
        self._refresh_counts(previous + names)

    def get_tag_names_for_work(self, work_id: str) -> List[str]:
        rows = self.session.query(WorkTag.tag_name).filter(WorkTag.work_id == work_id).all()
        return [row.tag_name for row in rows]

    def delete_for_work(self, work_id: str) -> None:
        """Remove the tag links of a work. The caller commits."""
        names = self.get_tag_names_for_work(work_id)
        self.session.query(WorkTag).filter(WorkTag.work_id == work_id).delete(synchronize_session=False)
        self.session.flush()
        self._refresh_counts(names)

    def delete(self, name: str) -> bool:
        """Delete a tag and its links to works"""
        tag = self.get(name)
        if tag is None:
            return False
        try:
            self.session.query(WorkTag).filter(WorkTag.tag_name == name).delete(synchronize_session=False)
            self.session.delete(tag)
            self.session.commit()
            return True
        except Exception:
            self.session.rollback()
            raise

    def count(self) -> int:
        return self.session.query(Tag).count()
